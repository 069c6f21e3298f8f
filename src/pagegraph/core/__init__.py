"""
pagegraph Core Module.

Fundamental building blocks shared by every analysis component:

    - Node, Edge, PageGraph: Graph data structures
    - GraphStore: rustworkx-backed node/edge store with dense ids
    - SelectorIndex: tag / #id / .class lookup used by style resolution
    - AnalysisContext: Per-run bundle of the above
    - Ok, Err: Result type returned by the engine
"""

from .exceptions import (
    AnalysisError,
    GraphNotFoundError,
    InvalidDocumentError,
    NodeNotFoundError,
    PageGraphError,
    ScriptParseError,
    StylesheetParseError,
)
from .graph import AnalysisContext, GraphStore, SelectorIndex
from .result import Err, Ok, Result
from .types import Edge, EdgeKind, Node, NodeKind, PageGraph, ParseIssue

__all__ = [
    "AnalysisContext",
    "AnalysisError",
    "Edge",
    "EdgeKind",
    "Err",
    "GraphNotFoundError",
    "GraphStore",
    "InvalidDocumentError",
    "Node",
    "NodeKind",
    "NodeNotFoundError",
    "Ok",
    "PageGraph",
    "PageGraphError",
    "ParseIssue",
    "Result",
    "ScriptParseError",
    "SelectorIndex",
    "StylesheetParseError",
]
