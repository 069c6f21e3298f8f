"""
Base Parser Infrastructure.

Shared plumbing for the three tree-sitter front-ends (html, javascript,
css): per-run parser creation, byte-offset addressed source text, and
error-node discovery used to decide whether a parse failed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from tree_sitter import Node as TSNode
from tree_sitter import Parser, Tree
from tree_sitter_language_pack import get_parser

logger = logging.getLogger(__name__)


def create_parser(language: str) -> Parser:
    """
    Create a new tree-sitter parser for a grammar name.

    Callers own the parser for the length of one analysis run. Grammar
    loading failures propagate unchanged; they are environment errors,
    not problems with the text being parsed.
    """
    logger.debug(f"Loading tree-sitter grammar: {language}")
    return get_parser(language)


@dataclass
class SourceText:
    """
    Source text of one sub-language document.

    tree-sitter reports byte offsets, so spans are sliced from the UTF-8
    encoding and decoded back.
    """

    text: str
    data: bytes = field(init=False, repr=False)

    def __post_init__(self):
        self.data = self.text.encode("utf-8")

    def slice(self, start: int, end: int) -> str:
        return self.data[start:end].decode("utf-8", errors="replace")

    def span(self, node: Optional[TSNode]) -> Optional[str]:
        """Verbatim text of a syntax node, or None if it has no usable span."""
        if node is None or node.is_missing:
            return None
        if node.end_byte <= node.start_byte:
            return None
        return self.slice(node.start_byte, node.end_byte)

    def span_or(self, node: Optional[TSNode], sentinel: str) -> str:
        text = self.span(node)
        return sentinel if text is None else text


@dataclass
class ParsedSource:
    """A syntax tree together with the text it was parsed from."""

    source: SourceText
    tree: Tree

    @property
    def root(self) -> TSNode:
        return self.tree.root_node


def parse_source(parser: Parser, text: str) -> ParsedSource:
    source = SourceText(text)
    tree = parser.parse(source.data)
    return ParsedSource(source=source, tree=tree)


def iter_preorder(root: TSNode) -> Iterator[TSNode]:
    """Depth-first, document-order traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def first_error(root: TSNode) -> Optional[TSNode]:
    """
    Locate the first ERROR or MISSING node, if the tree has any.

    Descends through the first erroneous child at each level, so when no
    explicit ERROR or MISSING node exists the deepest node flagged with
    has_error is returned rather than the root.
    """
    if not root.has_error:
        return None
    node = root
    while node.type != "ERROR" and not node.is_missing:
        child = next((c for c in node.children if c.has_error or c.is_missing), None)
        if child is None:
            break
        node = child
    return node


def first_child_of_type(node: TSNode, *types: str) -> Optional[TSNode]:
    for child in node.children:
        if child.type in types:
            return child
    return None


def describe(node: Any) -> str:
    """Short human-readable location of a syntax node for log messages."""
    try:
        row, column = node.start_point
        return f"{node.type} at {row + 1}:{column + 1}"
    except (AttributeError, TypeError, ValueError):
        return repr(node)
