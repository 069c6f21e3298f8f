"""
JavaScript front-end.

Parses inline script text with the tree-sitter javascript grammar. A tree
containing ERROR or MISSING nodes is treated as a failed parse so that a
broken script contributes nothing instead of a partial extraction.
"""

from typing import Optional

from tree_sitter import Parser

from ...core.exceptions import ScriptParseError
from ..base import ParsedSource, create_parser, describe, first_error, parse_source


def parse_script(text: str, parser: Optional[Parser] = None) -> ParsedSource:
    """Parse script text; raises ScriptParseError on a syntax error."""
    if parser is None:
        parser = create_parser("javascript")
    try:
        parsed = parse_source(parser, text)
    except Exception as e:
        raise ScriptParseError(f"script parser failed: {e}") from e

    error = first_error(parsed.root)
    if error is not None:
        raise ScriptParseError(f"syntax error near {describe(error)}", offset=error.start_byte)
    return parsed
