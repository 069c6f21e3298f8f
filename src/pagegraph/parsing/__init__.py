"""
Parsing and analysis components for pagegraph.

- html: markup front-end and Markup Tree Walker
- javascript: script front-end and Script Analyzer
- css: stylesheet front-end and Style Resolver
- engine: orchestration of a full analysis run
"""

from .engine import (
    AnalysisConfig,
    AnalysisEngine,
    Milestone,
    analyze_document,
)

__all__ = [
    "AnalysisConfig",
    "AnalysisEngine",
    "Milestone",
    "analyze_document",
]
