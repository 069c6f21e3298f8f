"""
JavaScript parsing module for pagegraph.

Provides static extraction from inline scripts:
- Function declarations and their parameters
- Return statements
- Variable declarations
- Assignment statements (DOM writes and other state changes)

Usage:
    from pagegraph.parsing.javascript import ScriptAnalyzer

    ScriptAnalyzer(context).analyze(script_id, text)
"""

from .analyzer import ScriptAnalyzer
from .parser import parse_script

__all__ = [
    "ScriptAnalyzer",
    "parse_script",
]
