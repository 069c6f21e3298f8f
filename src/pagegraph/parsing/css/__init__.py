"""
CSS parsing module for pagegraph.

Provides rule parsing for inline and linked stylesheets and the resolver
that links rules to the elements their selectors match.

Usage:
    from pagegraph.parsing.css import StyleResolver

    StyleResolver(context).resolve(stylesheet_id, css_text)
"""

from .parser import StyleRule, parse_stylesheet
from .resolver import StyleResolver
from .selectors import SelectorPart, parse_part, parse_selector, split_selector, strip_pseudo

__all__ = [
    "SelectorPart",
    "StyleResolver",
    "StyleRule",
    "parse_part",
    "parse_selector",
    "parse_stylesheet",
    "split_selector",
    "strip_pseudo",
]
