"""
HTML front-end.

Parses a markup document with the tree-sitter html grammar and adapts the
syntax tree into MarkupElement records: tag name, ordered attributes,
ordered element children and the byte span of the element. Text, comment,
doctype and stray end-tag nodes are dropped here.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tree_sitter import Node as TSNode
from tree_sitter import Parser

from ...config import SYNTHETIC_ROOT_NAME
from ...core.exceptions import InvalidDocumentError
from ..base import SourceText, create_parser, first_child_of_type, parse_source

logger = logging.getLogger(__name__)

ELEMENT_TYPES = ("element", "script_element", "style_element")
TAG_TYPES = ("start_tag", "self_closing_tag")


@dataclass
class MarkupElement:
    """One element of the parsed markup tree."""

    tag: str
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    children: List["MarkupElement"] = field(default_factory=list)
    start_byte: Optional[int] = None
    end_byte: Optional[int] = None
    raw_text: Optional[str] = None  # body of <script> / <style>
    synthetic: bool = False

    def get(self, name: str) -> Optional[str]:
        """Value of the first attribute with this name."""
        name = name.lower()
        for attr_name, value in self.attributes:
            if attr_name == name:
                return value
        return None

    @property
    def has_span(self) -> bool:
        return self.start_byte is not None and self.end_byte is not None


@dataclass
class MarkupDocument:
    """Traversal root plus the source it was sliced from."""

    root: MarkupElement
    source: SourceText

    def outer_text(self, element: MarkupElement) -> Optional[str]:
        if element.synthetic:
            return self.source.text
        if not element.has_span:
            return None
        return self.source.slice(element.start_byte, element.end_byte)


def parse_markup(text: str, parser: Optional[Parser] = None) -> MarkupDocument:
    """
    Parse a markup document into a MarkupDocument.

    Raises InvalidDocumentError when there is nothing to traverse. A grammar
    that cannot be loaded is not an input problem and propagates as is.
    """
    if not text or not text.strip():
        raise InvalidDocumentError("document is empty")

    if parser is None:
        parser = create_parser("html")
    try:
        parsed = parse_source(parser, text)
    except Exception as e:
        raise InvalidDocumentError(f"markup parser failed: {e}") from e

    top_level = _convert_children(parsed.root, parsed.source)
    if not top_level:
        raise InvalidDocumentError("no markup elements found")

    if len(top_level) == 1:
        root = top_level[0]
    else:
        logger.debug(f"{len(top_level)} top-level elements, wrapping in {SYNTHETIC_ROOT_NAME}")
        root = MarkupElement(tag=SYNTHETIC_ROOT_NAME, children=top_level, synthetic=True)

    return MarkupDocument(root=root, source=parsed.source)


def _convert_children(node: TSNode, source: SourceText) -> List[MarkupElement]:
    """Convert element children of a syntax node, iteratively."""
    result: List[MarkupElement] = []
    # (syntax node, list to append the converted element to)
    stack: List[Tuple[TSNode, List[MarkupElement]]] = [
        (child, result) for child in reversed(node.children) if child.type in ELEMENT_TYPES
    ]
    while stack:
        ts_node, sink = stack.pop()
        element = _convert_element(ts_node, source)
        if element is None:
            continue
        sink.append(element)
        for child in reversed(ts_node.children):
            if child.type in ELEMENT_TYPES:
                stack.append((child, element.children))
    return result


def _convert_element(node: TSNode, source: SourceText) -> Optional[MarkupElement]:
    tag_node = first_child_of_type(node, *TAG_TYPES)
    if tag_node is None:
        return None
    name_node = first_child_of_type(tag_node, "tag_name")
    if name_node is None:
        return None

    element = MarkupElement(
        tag=source.slice(name_node.start_byte, name_node.end_byte).lower(),
        attributes=_attributes(tag_node, source),
        start_byte=node.start_byte,
        end_byte=node.end_byte,
    )
    if node.type in ("script_element", "style_element"):
        raw = first_child_of_type(node, "raw_text")
        element.raw_text = source.span(raw) or ""
    return element


def _attributes(tag_node: TSNode, source: SourceText) -> List[Tuple[str, str]]:
    attributes: List[Tuple[str, str]] = []
    for attr in tag_node.named_children:
        if attr.type != "attribute":
            continue
        name_node = first_child_of_type(attr, "attribute_name")
        if name_node is None:
            continue
        name = source.slice(name_node.start_byte, name_node.end_byte).lower()

        value = ""
        for child in attr.named_children:
            if child.type == "attribute_value":
                value = source.span(child) or ""
            elif child.type == "quoted_attribute_value":
                inner = first_child_of_type(child, "attribute_value")
                value = source.span(inner) or ""
        attributes.append((name, value))
    return attributes
