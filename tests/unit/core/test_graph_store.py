"""Unit tests for the Graph Store and Selector Index."""

import pytest

from pagegraph.core.exceptions import PageGraphError
from pagegraph.core.graph import AnalysisContext, GraphStore, SelectorIndex
from pagegraph.core.types import EdgeKind, NodeKind


class TestGraphStore:
    def test_ids_are_dense_and_monotonic(self):
        """Ids come from a counter starting at zero."""
        store = GraphStore()
        ids = [store.create_node(f"n{i}", NodeKind.ELEMENT) for i in range(5)]

        assert ids == [0, 1, 2, 3, 4]
        assert [n.id for n in store.iter_nodes()] == ids
        assert store.node_count == 5

    def test_parent_creates_structural_edge(self):
        """Passing a parent appends a structural edge parent -> child."""
        store = GraphStore()
        root = store.create_node("div", NodeKind.ELEMENT)
        child = store.create_node("p", NodeKind.ELEMENT, parent=root, content="<p></p>")

        edges = list(store.iter_edges())
        assert len(edges) == 1
        assert edges[0].source == root
        assert edges[0].target == child
        assert edges[0].kind == EdgeKind.STRUCTURAL
        assert edges[0].label is None
        assert store.get_node(child).content == "<p></p>"
        assert store.edge_count == 1

    def test_create_edge_defaults_visible(self):
        """New edges are visible unless the presentation layer hides them."""
        store = GraphStore()
        a = store.create_node("a", NodeKind.FUNCTION)
        b = store.create_node("b", NodeKind.INPUT)
        store.create_edge(b, a, EdgeKind.INPUT)

        edge = next(store.iter_edges())
        assert edge.visible is True
        assert edge.kind == EdgeKind.INPUT

    def test_edges_keep_creation_order(self):
        """iter_edges yields edges in the order they were appended."""
        store = GraphStore()
        root = store.create_node("root", NodeKind.ELEMENT)
        first = store.create_node("first", NodeKind.ELEMENT, parent=root)
        store.create_edge(root, first, EdgeKind.OUTPUT, "late")
        second = store.create_node("second", NodeKind.ELEMENT, parent=root)

        kinds = [(e.source, e.target, e.kind) for e in store.iter_edges()]
        assert kinds == [
            (root, first, EdgeKind.STRUCTURAL),
            (root, first, EdgeKind.OUTPUT),
            (root, second, EdgeKind.STRUCTURAL),
        ]

    def test_parent_lookup_and_ancestors(self):
        """Ancestors are walked through the parent table, nearest first."""
        store = GraphStore()
        html = store.create_node("html", NodeKind.ELEMENT)
        body = store.create_node("body", NodeKind.ELEMENT, parent=html)
        span = store.create_node("span", NodeKind.ELEMENT, parent=body)

        assert store.parent_of(html) is None
        assert store.parent_of(span) == body
        assert list(store.ancestors_of(span)) == [body, html]
        assert list(store.ancestors_of(html)) == []

    def test_ancestors_ignore_non_structural_edges(self):
        """Input and output edges never take part in containment."""
        store = GraphStore()
        script = store.create_node("inline-script", NodeKind.SCRIPT)
        fn = store.create_node("Function: f", NodeKind.FUNCTION, parent=script)
        param = store.create_node("Input: x", NodeKind.INPUT, parent=fn)
        store.create_edge(param, fn, EdgeKind.INPUT)

        assert list(store.ancestors_of(fn)) == [script]
        assert list(store.ancestors_of(param)) == [fn, script]

    def test_get_node_out_of_range(self):
        """Unknown ids return None instead of raising."""
        store = GraphStore()
        assert store.get_node(0) is None
        assert store.get_node(-1) is None
        assert store.has_node(0) is False

    def test_out_of_sync_index_raises(self):
        """A node added behind the store's back breaks id alignment."""
        store = GraphStore()
        store._graph.add_node(None)

        with pytest.raises(PageGraphError, match="out of sync"):
            store.create_node("div", NodeKind.ELEMENT)


class TestSelectorIndex:
    def test_last_write_wins(self):
        """Registering a key twice keeps the later node id."""
        index = SelectorIndex()
        index.register_id("x", 1)
        index.register_id("x", 4)

        assert index.resolve("#x") == 4
        assert len(index) == 1

    def test_key_forms(self):
        """Tags are lowercased; ids and classes get their # and . prefixes."""
        index = SelectorIndex()
        index.register_tag("DIV", 0)
        index.register_class("card", 0)

        assert index.resolve("div") == 0
        assert index.resolve(".card") == 0
        assert index.resolve("#card") is None
        assert len(index) == 2


class TestAnalysisContext:
    def test_snapshot(self):
        """to_page_graph copies nodes, edges, script texts and issues."""
        context = AnalysisContext()
        root = context.store.create_node("div", NodeKind.ELEMENT)
        script = context.store.create_node("inline-script", NodeKind.SCRIPT, parent=root)
        context.script_contents[script] = "var a = 1;"
        context.record_issue(script, "syntax error")

        graph = context.to_page_graph()
        assert [n.id for n in graph.nodes] == [0, 1]
        assert [n.id for n in graph.children_of(root)] == [script]
        assert graph.script_contents == {1: "var a = 1;"}
        assert graph.errors[0].kind == NodeKind.SCRIPT
        assert graph.errors[0].message == "syntax error"

    def test_contexts_are_independent(self):
        """Each run gets its own store and index."""
        first = AnalysisContext()
        second = AnalysisContext()
        first.store.create_node("div", NodeKind.ELEMENT)
        first.selectors.register_tag("div", 0)

        assert second.store.node_count == 0
        assert len(second.selectors) == 0
