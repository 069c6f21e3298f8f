"""
Unit tests for the Script Analyzer.
"""

import pytest

from pagegraph.core.exceptions import ScriptParseError
from pagegraph.core.graph import AnalysisContext
from pagegraph.core.types import EdgeKind, NodeKind
from pagegraph.parsing.javascript import ScriptAnalyzer, parse_script


@pytest.fixture
def context():
    ctx = AnalysisContext()
    ctx.store.create_node("inline-script", NodeKind.SCRIPT)
    return ctx


def analyze(context, text: str) -> bool:
    return ScriptAnalyzer(context).analyze(0, text)


def of_kind(context, kind):
    return [n for n in context.store.iter_nodes() if n.kind == kind]


def names(context):
    return [n.name for n in context.store.iter_nodes()]


def labelled_edges(context):
    return [
        (e.source, e.target, e.kind, e.label)
        for e in context.store.iter_edges()
        if e.kind != EdgeKind.STRUCTURAL
    ]


class TestFunctions:
    def test_function_with_parameters(self, context):
        """Functions get input children and a labelled return output."""
        assert analyze(context, "function add(a, b) { return a + b; }") is True

        assert names(context) == [
            "inline-script",
            "Function: add",
            "Input: a",
            "Input: b",
            "Return: a + b",
        ]
        fn = context.store.get_node(1)
        assert fn.kind == NodeKind.FUNCTION
        assert fn.content == "function add(a, b) { return a + b; }"
        assert context.store.parent_of(1) == 0

        assert labelled_edges(context) == [
            (2, 1, EdgeKind.INPUT, None),
            (3, 1, EdgeKind.INPUT, None),
            (1, 4, EdgeKind.OUTPUT, "Returns: a + b"),
        ]

    def test_parameter_forms(self, context):
        """Defaults, patterns and rest parameters are all inputs."""
        analyze(context, "function f(x = 1, { y }, ...rest) {}")

        inputs = [n.name for n in of_kind(context, NodeKind.INPUT)]
        assert inputs == ["Input: x", "Input: { y }", "Input: rest"]

    def test_function_without_parameters_or_body_statements(self, context):
        """An empty function is a single node."""
        analyze(context, "function noop() {}")

        assert names(context) == ["inline-script", "Function: noop"]

    def test_function_content_reparses_to_same_signature(self, context):
        """Function content is its own source slice."""
        analyze(context, "var a = 1;\nfunction greet(name, greeting) {\n  return greeting + name;\n}\n")

        fn = of_kind(context, NodeKind.FUNCTION)[0]
        parsed = parse_script(fn.content)
        declaration = parsed.root.named_children[0]
        assert declaration.type == "function_declaration"
        assert parsed.source.span(declaration.child_by_field_name("name")) == "greet"
        params = declaration.child_by_field_name("parameters").named_children
        assert len(params) == 2

    def test_nested_function_is_scoped_to_outer(self, context):
        """Inner declarations attach to the enclosing function."""
        analyze(context, "function outer() { function inner(z) { return z; } return inner; }")

        assert names(context) == [
            "inline-script",
            "Function: outer",
            "Function: inner",
            "Input: z",
            "Return: z",
            "Return: inner",
        ]
        assert context.store.parent_of(2) == 1
        assert context.store.parent_of(4) == 2
        assert context.store.parent_of(5) == 1

    def test_declarations_inside_blocks_are_found(self, context):
        """Control-flow blocks do not hide declarations."""
        analyze(context, "if (ready) { function later(x) { while (true) { return x; } } }")

        assert context.store.parent_of(1) == 0
        returns = of_kind(context, NodeKind.OUTPUT)
        assert [r.name for r in returns] == ["Return: x"]
        assert context.store.parent_of(returns[0].id) == 1


class TestReturns:
    def test_bare_return(self, context):
        """A return without a value uses the empty sentinel."""
        analyze(context, "function stop() { return; }")

        output = context.store.get_node(2)
        assert output.name == "Return: <empty>"
        assert output.content == "<empty>"
        assert labelled_edges(context) == [(1, 2, EdgeKind.OUTPUT, "Returns: <empty>")]


class TestVariables:
    def test_declarations(self, context):
        """Each declarator is a variable with a Sets edge."""
        analyze(context, "let x = 5, y;\nconst z = x * 2;")

        variables = of_kind(context, NodeKind.VARIABLE)
        assert [(v.name, v.content) for v in variables] == [
            ("Variable: x", "5"),
            ("Variable: y", "<uninitialized>"),
            ("Variable: z", "x * 2"),
        ]
        assert [label for *_, label in labelled_edges(context)] == [
            "Sets: x = 5",
            "Sets: y = <uninitialized>",
            "Sets: z = x * 2",
        ]

    def test_function_expression_value_is_descended(self, context):
        """Returns inside function expressions are still found."""
        analyze(context, "var handler = function () { return 1; };")

        assert names(context) == ["inline-script", "Variable: handler", "Return: 1"]
        # function expressions do not open a new scope
        assert context.store.parent_of(2) == 0


class TestAssignments:
    def test_dom_change(self, context):
        """Member assignments are DOM changes off the current scope."""
        analyze(context, "document.getElementById('out').textContent = total;")

        change = context.store.get_node(1)
        assert change.kind == NodeKind.DOM_CHANGE
        assert change.name == "DOM Change: document.getElementById('out').textContent"
        assert change.content == "total"
        assert labelled_edges(context) == [
            (0, 1, EdgeKind.OUTPUT, "Modifies: document.getElementById('out').textContent"),
        ]

    def test_augmented_assignment(self, context):
        """Compound assignments count as DOM changes too."""
        analyze(context, "counter += 1;")

        assert names(context) == ["inline-script", "DOM Change: counter"]
        assert context.store.get_node(1).content == "1"

    def test_assignment_inside_function_uses_function_scope(self, context):
        """Assignments in a function hang off that function."""
        analyze(context, "function render(v) { el.innerHTML = v; }")

        change = of_kind(context, NodeKind.DOM_CHANGE)[0]
        assert context.store.parent_of(change.id) == 1

    def test_plain_call_creates_nothing(self, context):
        """Calls alone add no nodes."""
        analyze(context, "console.log('hi');")

        assert names(context) == ["inline-script"]


class TestSyntaxErrors:
    def test_parse_script_raises(self):
        """Syntax errors raise with a byte offset."""
        with pytest.raises(ScriptParseError) as exc_info:
            parse_script("function broken( {")
        assert exc_info.value.offset is not None

    def test_broken_script_contributes_nothing(self, context):
        """A failed parse records an issue and adds no nodes."""
        assert analyze(context, "function broken( {") is False

        assert names(context) == ["inline-script"]
        assert len(context.issues) == 1
        assert context.issues[0].node_id == 0
        assert "syntax error" in context.issues[0].message

    def test_next_script_still_analyzed(self, context):
        """One broken script does not stop the next."""
        second = context.store.create_node("inline-script", NodeKind.SCRIPT)
        analyzer = ScriptAnalyzer(context)

        assert analyzer.analyze(0, "var = ;") is False
        assert analyzer.analyze(second, "var ok = 1;") is True

        variable = of_kind(context, NodeKind.VARIABLE)[0]
        assert context.store.parent_of(variable.id) == second

    def test_error_location_points_past_valid_code(self):
        """The reported location is the broken statement, not the program root."""
        with pytest.raises(ScriptParseError) as exc_info:
            parse_script("var ok = 1;\nfunction broken( {")

        assert "near program" not in str(exc_info.value)
