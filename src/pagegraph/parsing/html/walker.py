"""
Markup Tree Walker.

Depth-first traversal of the parsed markup tree. For each element it:
- creates an Element node holding the element's verbatim source slice,
- registers the tag name, `#id` and each `.class` in the Selector Index,
- creates an `inline-style` child for a `style` attribute,
- and continues into its children with a containment edge from the parent.

<script>, <style> and <link rel="stylesheet"> are recorded as script,
stylesheet and external-style nodes. They are still indexed by tag, id
and class, and are handed back to the engine so the Script Analyzer and
Style Resolver can process them afterwards.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ...config import (
    INLINE_SCRIPT_NAME,
    INLINE_STYLE_NAME,
    INLINE_STYLESHEET_NAME,
    JAVASCRIPT_MIME_TYPES,
)
from ...core.graph import AnalysisContext
from ...core.types import NodeKind
from .parser import MarkupDocument, MarkupElement

logger = logging.getLogger(__name__)


@dataclass
class DiscoveredScript:
    """A <script> element found during traversal."""
    node_id: int
    text: str
    analyzable: bool


@dataclass
class DiscoveredStylesheet:
    """A <style> element or stylesheet link found during traversal."""
    node_id: int
    text: Optional[str] = None
    href: Optional[str] = None

    @property
    def is_external(self) -> bool:
        return self.href is not None


@dataclass
class WalkResult:
    root_id: int
    scripts: List[DiscoveredScript] = field(default_factory=list)
    stylesheets: List[DiscoveredStylesheet] = field(default_factory=list)


def element_label(element: MarkupElement) -> str:
    """Human-readable label: tag, then #id, then .class tokens."""
    label = element.tag
    element_id = element.get("id")
    if element_id:
        label += f"#{element_id}"
    for _, value in _attributes_named(element, "class"):
        for token in value.split():
            label += f".{token}"
    return label


def is_stylesheet_link(element: MarkupElement) -> bool:
    if element.tag != "link":
        return False
    rel = (element.get("rel") or "").lower().split()
    return "stylesheet" in rel and bool(element.get("href"))


def is_javascript(element: MarkupElement) -> bool:
    script_type = (element.get("type") or "").strip().lower()
    # Parameters such as "; charset=utf-8" do not change the language
    return script_type.split(";")[0].strip() in JAVASCRIPT_MIME_TYPES


def _attributes_named(element: MarkupElement, name: str) -> List[Tuple[str, str]]:
    return [(n, v) for n, v in element.attributes if n == name]


class MarkupWalker:
    """Builds the element tree and the Selector Index for one document."""

    def __init__(self, context: AnalysisContext):
        self.context = context

    def walk(self, document: MarkupDocument) -> WalkResult:
        result: Optional[WalkResult] = None
        stack: List[Tuple[MarkupElement, Optional[int]]] = [(document.root, None)]

        # Explicit stack keeps pre-order id allocation without recursion limits
        while stack:
            element, parent_id = stack.pop()
            node_id, descend = self._visit(element, parent_id, document)
            if result is None:
                result = WalkResult(root_id=node_id)
            self._collect(element, node_id, result)
            if descend:
                for child in reversed(element.children):
                    stack.append((child, node_id))

        logger.debug(
            f"Traversal complete: {self.context.store.node_count} nodes, "
            f"{self.context.store.edge_count} edges, {len(self.context.selectors)} selector keys, "
            f"{len(result.scripts)} scripts, {len(result.stylesheets)} stylesheets"
        )
        return result

    def _visit(
        self,
        element: MarkupElement,
        parent_id: Optional[int],
        document: MarkupDocument,
    ) -> Tuple[int, bool]:
        """Create the node(s) for one element; returns (node id, descend?)."""
        store = self.context.store

        if element.tag == "script":
            node_id = self._visit_script(element, parent_id)
            descend = False
        elif element.tag == "style":
            node_id = store.create_node(
                INLINE_STYLESHEET_NAME, NodeKind.STYLESHEET, parent_id, element.raw_text or None
            )
            descend = False
        elif is_stylesheet_link(element):
            node_id = store.create_node(element.get("href"), NodeKind.EXTERNAL_STYLE, parent_id)
            descend = False
        else:
            node_id = store.create_node(
                element_label(element), NodeKind.ELEMENT, parent_id, document.outer_text(element)
            )
            descend = True

        if not element.synthetic:
            self._register(element, node_id)
        return node_id, descend

    def _register(self, element: MarkupElement, node_id: int) -> None:
        """Index tag, #id and .class keys; a style attribute becomes an inline-style child."""
        store = self.context.store
        selectors = self.context.selectors

        selectors.register_tag(element.tag, node_id)
        for name, value in element.attributes:
            if name == "id":
                if value:
                    selectors.register_id(value, node_id)
            elif name == "class":
                for token in value.split():
                    selectors.register_class(token, node_id)
            elif name == "style":
                store.create_node(INLINE_STYLE_NAME, NodeKind.INLINE_STYLE, node_id, value)

    def _visit_script(self, element: MarkupElement, parent_id: Optional[int]) -> int:
        src = element.get("src")
        if src:
            return self.context.store.create_node(src, NodeKind.SCRIPT, parent_id)

        text = element.raw_text or ""
        node_id = self.context.store.create_node(
            INLINE_SCRIPT_NAME, NodeKind.SCRIPT, parent_id, text or None
        )
        if text.strip():
            self.context.script_contents[node_id] = text
        return node_id

    def _collect(self, element: MarkupElement, node_id: int, result: WalkResult) -> None:
        """Queue scripts and stylesheets for the later phases."""
        if element.tag == "script":
            if element.get("src"):
                logger.debug(f"External script {element.get('src')!r} recorded, not analyzed")
                return
            text = element.raw_text or ""
            if not text.strip():
                return
            analyzable = is_javascript(element)
            if not analyzable:
                logger.debug(f"Script of type {element.get('type')!r} recorded, not analyzed")
            result.scripts.append(DiscoveredScript(node_id=node_id, text=text, analyzable=analyzable))
        elif element.tag == "style":
            result.stylesheets.append(DiscoveredStylesheet(node_id=node_id, text=element.raw_text or ""))
        elif is_stylesheet_link(element):
            result.stylesheets.append(DiscoveredStylesheet(node_id=node_id, href=element.get("href")))
