"""
Global Configuration and Safe Defaults.

This module centralizes the defaults used by the analysis pipeline:
sentinel strings substituted for missing source spans, size limits that
protect the front-ends from pathological input, and the fixed progress
milestones reported by the engine.
"""

from typing import Set

# --- Safety Limits ---
# Documents larger than this are rejected as invalid input
MAX_DOCUMENT_SIZE_BYTES = 5 * 1024 * 1024  # 5MB

# --- Sentinels ---
# Substituted wherever a syntax-tree node has no usable span
EMPTY_RETURN = "<empty>"
UNINITIALIZED = "<uninitialized>"
UNKNOWN_SPAN = "<unknown>"

# --- Markup ---
# Name of the element node synthesized when a document has several top-level elements
SYNTHETIC_ROOT_NAME = "#document"

INLINE_SCRIPT_NAME = "inline-script"
INLINE_STYLESHEET_NAME = "inline-stylesheet"
INLINE_STYLE_NAME = "Inline Style"

# <script type="..."> values that are analyzed as JavaScript
JAVASCRIPT_MIME_TYPES: Set[str] = {
    "",
    "module",
    "text/javascript",
    "application/javascript",
    "application/ecmascript",
    "text/ecmascript",
    "application/x-javascript",
    "text/jscript",
}

# --- Progress ---
# Percent complete reported at each fixed milestone
MILESTONE_STRUCTURE = 25
MILESTONE_EXTRACTION = 50
MILESTONE_STYLES = 75
MILESTONE_DONE = 100

# --- CLI ---
DEFAULT_OUTPUT_FILE = "pagegraph.json"
