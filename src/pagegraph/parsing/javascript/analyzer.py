"""
Script Analyzer for pagegraph.

Static extraction from one inline script. The syntax tree is visited with
an explicit dispatch on node type:

- function declarations -> Function node, one Input node per parameter
  (with an `input` edge parameter -> function); the body is visited with
  the function as the enclosing scope
- return statements     -> Output node with an `output` edge from the scope
- variable declarations -> one Variable node per declarator
- assignment statements -> DomChange node recording both sides

Every other node type is descended into with the scope unchanged, so
declarations nested in conditionals, loops and blocks are still found.
Nothing is evaluated.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from tree_sitter import Node as TSNode
from tree_sitter import Parser

from ...config import EMPTY_RETURN, UNINITIALIZED, UNKNOWN_SPAN
from ...core.exceptions import ScriptParseError
from ...core.graph import AnalysisContext
from ...core.types import EdgeKind, NodeKind
from ..base import SourceText, create_parser
from .parser import parse_script

logger = logging.getLogger(__name__)

ASSIGNMENT_TYPES = ("assignment_expression", "augmented_assignment_expression")

# (syntax node, enclosing scope id) pairs still to visit
Continuation = Iterable[Tuple[TSNode, int]]
Handler = Callable[[TSNode, int, SourceText], Continuation]


def _significant_children(node: TSNode) -> List[TSNode]:
    return [c for c in node.named_children if c.type != "comment"]


def _first_significant_child(node: TSNode) -> Optional[TSNode]:
    children = _significant_children(node)
    return children[0] if children else None


class ScriptAnalyzer:
    """Extracts functions, inputs, outputs, variables and assignments."""

    def __init__(self, context: AnalysisContext):
        self.context = context
        self._parser: Optional[Parser] = None
        self._handlers: Dict[str, Handler] = {
            "function_declaration": self._visit_function,
            "generator_function_declaration": self._visit_function,
            "return_statement": self._visit_return,
            "lexical_declaration": self._visit_declaration,
            "variable_declaration": self._visit_declaration,
            "expression_statement": self._visit_expression_statement,
        }

    def analyze(self, script_id: int, text: str) -> bool:
        """
        Analyze one script attached to `script_id`.

        Returns False when the script failed to parse; the failure is
        logged and recorded on the context, and no nodes are created.
        """
        parser = self._get_parser()
        try:
            parsed = parse_script(text, parser)
        except ScriptParseError as e:
            logger.warning(f"Script node {script_id} not analyzed: {e}")
            self.context.record_issue(script_id, str(e))
            return False

        before = self.context.store.node_count
        self._walk(parsed.root, script_id, parsed.source)
        logger.debug(
            f"Script node {script_id}: {self.context.store.node_count - before} nodes extracted"
        )
        return True

    def _get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = create_parser("javascript")
        return self._parser

    def _walk(self, root: TSNode, scope: int, source: SourceText) -> None:
        stack: List[Tuple[TSNode, int]] = [(root, scope)]
        while stack:
            node, current_scope = stack.pop()
            handler = self._handlers.get(node.type)
            if handler is None:
                pending = [(child, current_scope) for child in node.named_children]
            else:
                pending = list(handler(node, current_scope, source))
            stack.extend(reversed(pending))

    # --- Handlers ---

    def _visit_function(self, node: TSNode, scope: int, source: SourceText) -> Continuation:
        store = self.context.store

        name = source.span_or(node.child_by_field_name("name"), UNKNOWN_SPAN)
        function_id = store.create_node(
            f"Function: {name}", NodeKind.FUNCTION, scope, source.span_or(node, UNKNOWN_SPAN)
        )

        parameters = node.child_by_field_name("parameters")
        if parameters is not None:
            for param in _significant_children(parameters):
                param_name = self._parameter_name(param, source)
                input_id = store.create_node(f"Input: {param_name}", NodeKind.INPUT, function_id)
                store.create_edge(input_id, function_id, EdgeKind.INPUT)

        body = node.child_by_field_name("body")
        if body is not None:
            yield body, function_id

    def _visit_return(self, node: TSNode, scope: int, source: SourceText) -> Continuation:
        store = self.context.store

        argument = _first_significant_child(node)
        value = EMPTY_RETURN if argument is None else source.span_or(argument, UNKNOWN_SPAN)

        output_id = store.create_node(f"Return: {value}", NodeKind.OUTPUT, scope, value)
        store.create_edge(scope, output_id, EdgeKind.OUTPUT, f"Returns: {value}")

        if argument is not None:
            yield argument, scope

    def _visit_declaration(self, node: TSNode, scope: int, source: SourceText) -> Continuation:
        store = self.context.store

        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            name = source.span_or(declarator.child_by_field_name("name"), UNKNOWN_SPAN)
            value_node = declarator.child_by_field_name("value")
            value = UNINITIALIZED if value_node is None else source.span_or(value_node, UNKNOWN_SPAN)

            variable_id = store.create_node(f"Variable: {name}", NodeKind.VARIABLE, scope, value)
            store.create_edge(scope, variable_id, EdgeKind.OUTPUT, f"Sets: {name} = {value}")

            if value_node is not None:
                yield value_node, scope

    def _visit_expression_statement(
        self, node: TSNode, scope: int, source: SourceText
    ) -> Continuation:
        expression = _first_significant_child(node)
        if expression is None:
            return
        if expression.type not in ASSIGNMENT_TYPES:
            yield expression, scope
            return

        store = self.context.store
        left = expression.child_by_field_name("left")
        right = expression.child_by_field_name("right")
        lhs = source.span_or(left, UNKNOWN_SPAN)
        rhs = source.span_or(right, UNKNOWN_SPAN)

        change_id = store.create_node(f"DOM Change: {lhs}", NodeKind.DOM_CHANGE, scope, rhs)
        store.create_edge(scope, change_id, EdgeKind.OUTPUT, f"Modifies: {lhs}")

        for side in (left, right):
            if side is not None:
                yield side, scope

    @staticmethod
    def _parameter_name(param: TSNode, source: SourceText) -> str:
        if param.type == "assignment_pattern":
            target = param.child_by_field_name("left")
        elif param.type == "rest_pattern":
            target = _first_significant_child(param)
        else:
            target = param
        return source.span_or(target, UNKNOWN_SPAN)
