"""
CSS front-end.

Parses stylesheet text with the tree-sitter css grammar into the ordered
list of rules and their selector texts. Rule sets nested inside at-rule
blocks (@media, @supports) are included in document order.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from tree_sitter import Parser

from ...core.exceptions import StylesheetParseError
from ..base import create_parser, describe, first_child_of_type, first_error, iter_preorder, parse_source


@dataclass
class StyleRule:
    """One rule set: its selector texts in source order."""
    selectors: List[str] = field(default_factory=list)
    start_byte: int = 0


def parse_stylesheet(text: str, parser: Optional[Parser] = None) -> List[StyleRule]:
    """Parse stylesheet text into rules; raises StylesheetParseError on a syntax error."""
    if parser is None:
        parser = create_parser("css")
    try:
        parsed = parse_source(parser, text)
    except Exception as e:
        raise StylesheetParseError(f"stylesheet parser failed: {e}") from e

    error = first_error(parsed.root)
    if error is not None:
        raise StylesheetParseError(f"syntax error near {describe(error)}", offset=error.start_byte)

    rules: List[StyleRule] = []
    for node in iter_preorder(parsed.root):
        if node.type != "rule_set":
            continue
        selectors_node = first_child_of_type(node, "selectors")
        selectors: List[str] = []
        if selectors_node is not None:
            for selector in selectors_node.named_children:
                if selector.type == "comment":
                    continue
                text_value = parsed.source.span(selector)
                if text_value and text_value.strip():
                    selectors.append(text_value.strip())
        rules.append(StyleRule(selectors=selectors, start_byte=node.start_byte))
    return rules
