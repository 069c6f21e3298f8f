"""
pagegraph: markup/script/style analysis into a single queryable graph.

Usage:
    from pagegraph import analyze_document

    graph = analyze_document(html_text)
    for edge in graph.edges:
        ...
"""

from .core.exceptions import AnalysisError, InvalidDocumentError, PageGraphError
from .core.types import Edge, EdgeKind, Node, NodeKind, PageGraph
from .parsing.engine import AnalysisConfig, AnalysisEngine, Milestone, analyze_document

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfig",
    "AnalysisEngine",
    "AnalysisError",
    "Edge",
    "EdgeKind",
    "InvalidDocumentError",
    "Milestone",
    "Node",
    "NodeKind",
    "PageGraph",
    "PageGraphError",
    "analyze_document",
    "__version__",
]
