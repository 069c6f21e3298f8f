"""
HTML parsing module for pagegraph.

Provides the markup front-end and the tree walker that builds the element
tree and the Selector Index:

Usage:
    from pagegraph.parsing.html import MarkupWalker, parse_markup

    document = parse_markup(text)
    walk = MarkupWalker(context).walk(document)
"""

from .parser import MarkupDocument, MarkupElement, parse_markup
from .walker import (
    DiscoveredScript,
    DiscoveredStylesheet,
    MarkupWalker,
    WalkResult,
    element_label,
)

__all__ = [
    "DiscoveredScript",
    "DiscoveredStylesheet",
    "MarkupDocument",
    "MarkupElement",
    "MarkupWalker",
    "WalkResult",
    "element_label",
    "parse_markup",
]
