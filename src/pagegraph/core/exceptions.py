"""
Exception hierarchy for pagegraph.

Fatal problems with the input document raise InvalidDocumentError. Parse
failures scoped to one script or stylesheet are raised inside the
analyzers, caught by them, and recorded on the graph instead of aborting
the run.
"""

from dataclasses import dataclass


class PageGraphError(Exception):
    """Base class for all pagegraph errors."""


class InvalidDocumentError(PageGraphError):
    """The markup document cannot be turned into a tree."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid input: {reason}")


class ScriptParseError(PageGraphError):
    """An inline script could not be parsed."""

    def __init__(self, message: str, offset: int | None = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)


class StylesheetParseError(PageGraphError):
    """A stylesheet could not be parsed into a rule list."""

    def __init__(self, message: str, offset: int | None = None):
        self.offset = offset
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)


class GraphNotFoundError(PageGraphError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Graph file not found: {path}")


class NodeNotFoundError(PageGraphError):
    def __init__(self, node_ref: str):
        self.node_ref = node_ref
        super().__init__(f"Node not found: {node_ref}")


@dataclass
class AnalysisError:
    """Structured error returned by the engine for a failed analysis."""
    message: str
    kind: str = "internal"  # "invalid_input" or "internal"
    cause: Exception | None = None

    @property
    def is_invalid_input(self) -> bool:
        return self.kind == "invalid_input"
