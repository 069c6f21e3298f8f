"""
Graph Store implementation backed by rustworkx.

It manages:
- Dense node identifiers, which are the rustworkx node indices (nodes are
  never removed, so ids are exactly 0..N-1 in creation order).
- The node id -> parent id table filled by create_node, used for O(1)
  ancestor walks during selector resolution.
- The Selector Index (tag / #id / .class -> most recent node id).
- The per-run AnalysisContext that bundles both with the script content
  store.
"""

from typing import Dict, Iterator, List, Optional

import rustworkx as rx

from .exceptions import PageGraphError
from .types import Edge, EdgeKind, Node, NodeKind, PageGraph, ParseIssue


class SelectorIndex:
    """
    Mapping from selector key to the most recently registered node id.

    Keys are `tagname`, `#id` or `.class`. Registering an existing key
    overwrites the previous entry (last write wins).
    """

    def __init__(self):
        self._key_to_node: Dict[str, int] = {}

    def register(self, key: str, node_id: int) -> None:
        self._key_to_node[key] = node_id

    def register_tag(self, tag: str, node_id: int) -> None:
        self.register(tag.lower(), node_id)

    def register_id(self, element_id: str, node_id: int) -> None:
        self.register(f"#{element_id}", node_id)

    def register_class(self, class_name: str, node_id: int) -> None:
        self.register(f".{class_name}", node_id)

    def resolve(self, key: str) -> Optional[int]:
        """Find the node id registered under a key."""
        return self._key_to_node.get(key)

    def __len__(self) -> int:
        return len(self._key_to_node)


class GraphStore:
    """
    Owns the node and edge tables for a single analysis run.

    create_node and create_edge are the only ways to add state. Both are
    total: callers are responsible for passing ids they obtained from
    create_node.
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=True)
        self._next_id = 0
        self._parents: Dict[int, int] = {}

    def create_node(
        self,
        name: str,
        kind: NodeKind,
        parent: Optional[int] = None,
        content: Optional[str] = None,
    ) -> int:
        """Allocate the next id, append the node and, if given, its containment edge."""
        node_id = self._next_id
        self._next_id += 1

        idx = self._graph.add_node(Node(id=node_id, name=name, kind=kind, content=content))
        # Node ids double as rustworkx indices; nothing is ever removed
        if idx != node_id:
            raise PageGraphError(f"Graph store out of sync: index {idx} for node {node_id}")

        if parent is not None:
            self._parents[node_id] = parent
            self.create_edge(parent, node_id, EdgeKind.STRUCTURAL)
        return node_id

    def create_edge(
        self,
        source: int,
        target: int,
        kind: EdgeKind,
        label: Optional[str] = None,
    ) -> None:
        """Append a visible edge."""
        self._graph.add_edge(source, target, Edge(source=source, target=target, kind=kind, label=label))

    def get_node(self, node_id: int) -> Optional[Node]:
        """Retrieve a node by ID."""
        if self.has_node(node_id):
            return self._graph[node_id]
        return None

    def has_node(self, node_id: int) -> bool:
        return 0 <= node_id < self._next_id

    def parent_of(self, node_id: int) -> Optional[int]:
        """Structural parent of a node, or None for the traversal root."""
        return self._parents.get(node_id)

    def ancestors_of(self, node_id: int) -> Iterator[int]:
        """Yield structural ancestors from the nearest parent upward."""
        current = self.parent_of(node_id)
        while current is not None:
            yield current
            current = self.parent_of(current)

    def iter_nodes(self) -> Iterator[Node]:
        return iter(self._graph.nodes())

    def iter_edges(self) -> Iterator[Edge]:
        for idx in sorted(self._graph.edge_indices()):
            yield self._graph.get_edge_data_by_index(idx)

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()


class AnalysisContext:
    """
    Everything one analysis run mutates.

    A fresh context is created per run; components receive it explicitly
    and keep no state of their own between runs.
    """

    def __init__(self):
        self.store = GraphStore()
        self.selectors = SelectorIndex()
        self.script_contents: Dict[int, str] = {}
        self.issues: List[ParseIssue] = []

    def record_issue(self, node_id: int, message: str) -> None:
        node = self.store.get_node(node_id)
        self.issues.append(ParseIssue(node_id=node_id, kind=node.kind, message=message))

    def to_page_graph(self) -> PageGraph:
        return PageGraph(
            nodes=list(self.store.iter_nodes()),
            edges=list(self.store.iter_edges()),
            script_contents=dict(self.script_contents),
            errors=list(self.issues),
        )
