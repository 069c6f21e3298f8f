"""
Analysis Engine for pagegraph.

Orchestrates one synchronous analysis of a markup document:

1. Markup Tree Walker  -> element tree, Selector Index      (STRUCTURE, 25%)
2. Script Analyzer per inline script, stylesheet parsing     (EXTRACTION, 50%)
3. Style Resolver over the finished containment tree         (STYLES, 75%)
4. Snapshot into a PageGraph                                  (DONE, 100%)

Fatal failures are returned as Err(AnalysisError) instead of raised, so
callers always get either a complete graph or a single error.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..config import (
    MAX_DOCUMENT_SIZE_BYTES,
    MILESTONE_DONE,
    MILESTONE_EXTRACTION,
    MILESTONE_STRUCTURE,
    MILESTONE_STYLES,
)
from ..core.exceptions import AnalysisError, InvalidDocumentError, PageGraphError
from ..core.graph import AnalysisContext
from ..core.result import Err, Ok, Result
from ..core.types import PageGraph
from .base import create_parser
from .css import StyleResolver, StyleRule
from .html import DiscoveredStylesheet, MarkupWalker, parse_markup
from .javascript import ScriptAnalyzer

logger = logging.getLogger(__name__)


class Milestone(StrEnum):
    """Fixed progress points, reported in this order."""
    STRUCTURE = "structure"
    EXTRACTION = "extraction"
    STYLES = "styles"
    DONE = "done"


MILESTONE_PERCENT: Dict[Milestone, int] = {
    Milestone.STRUCTURE: MILESTONE_STRUCTURE,
    Milestone.EXTRACTION: MILESTONE_EXTRACTION,
    Milestone.STYLES: MILESTONE_STYLES,
    Milestone.DONE: MILESTONE_DONE,
}

ProgressCallback = Callable[[Milestone, int], None]
CompletionCallback = Callable[[PageGraph], None]
StylesheetLoader = Callable[[str], Optional[str]]


@dataclass
class AnalysisConfig:
    """Options for one analysis run."""
    analyze_scripts: bool = True
    resolve_styles: bool = True
    # href -> CSS text for <link rel="stylesheet"> references
    stylesheets: Dict[str, str] = field(default_factory=dict)
    stylesheet_loader: Optional[StylesheetLoader] = None
    max_document_bytes: int = MAX_DOCUMENT_SIZE_BYTES

    def load_stylesheet(self, href: str) -> Optional[str]:
        """Text of an external stylesheet, or None if the caller did not supply it."""
        if href in self.stylesheets:
            return self.stylesheets[href]
        if self.stylesheet_loader is not None:
            return self.stylesheet_loader(href)
        return None


class AnalysisEngine:
    """
    Central orchestrator for analysis runs.
    Returns Result objects instead of raising exceptions.
    """

    def __init__(self, config: AnalysisConfig | None = None):
        self.config = config or AnalysisConfig()
        self._logger = logging.getLogger(f"{__name__}.AnalysisEngine")

    def analyze(
        self,
        document: Union[str, bytes],
        progress_callback: Optional[ProgressCallback] = None,
        on_complete: Optional[CompletionCallback] = None,
    ) -> Result[PageGraph, AnalysisError]:
        """
        Analyze a markup document.
        Returns Ok(PageGraph) or Err(AnalysisError).
        """
        start_time = time.perf_counter()

        try:
            text = self._decode(document)
            graph = self._run(text, progress_callback)
        except InvalidDocumentError as e:
            self._logger.error(str(e))
            return Err(AnalysisError(str(e), kind="invalid_input", cause=e))
        except Exception as e:
            self._logger.error(f"Analysis failed: {e}")
            return Err(AnalysisError(f"Analysis failed: {e}", kind="internal", cause=e))

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        self._logger.debug(
            f"Analysis complete: {len(graph.nodes)} nodes, {len(graph.edges)} edges "
            f"in {elapsed_ms:.1f}ms"
        )

        if on_complete is not None:
            on_complete(graph)
        return Ok(graph)

    def _decode(self, document: Union[str, bytes]) -> str:
        if isinstance(document, bytes):
            size = len(document)
            try:
                text = document.decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidDocumentError(f"document is not valid UTF-8 ({e.reason})") from e
        elif isinstance(document, str):
            text = document
            size = len(text.encode("utf-8"))
        else:
            raise InvalidDocumentError(f"expected text, got {type(document).__name__}")

        if size > self.config.max_document_bytes:
            raise InvalidDocumentError(
                f"document is {size} bytes, limit is {self.config.max_document_bytes}"
            )
        return text

    def _run(self, text: str, progress_callback: Optional[ProgressCallback]) -> PageGraph:
        context = AnalysisContext()

        # 1. Structure
        markup = parse_markup(text, create_parser("html"))
        walk = MarkupWalker(context).walk(markup)
        self._report(progress_callback, Milestone.STRUCTURE)

        # 2. Extraction
        if self.config.analyze_scripts:
            analyzer = ScriptAnalyzer(context)
            for script in walk.scripts:
                if script.analyzable:
                    analyzer.analyze(script.node_id, script.text)

        resolver = StyleResolver(context)
        parsed_sheets: List[Tuple[int, List[StyleRule]]] = []
        if self.config.resolve_styles:
            for sheet in walk.stylesheets:
                css = self._stylesheet_text(sheet)
                if css is None:
                    continue
                rules = resolver.load_rules(sheet.node_id, css)
                if rules is not None:
                    parsed_sheets.append((sheet.node_id, rules))
        self._report(progress_callback, Milestone.EXTRACTION)

        # 3. Style resolution
        for stylesheet_id, rules in parsed_sheets:
            resolver.apply(stylesheet_id, rules)
        self._report(progress_callback, Milestone.STYLES)

        # 4. Done
        graph = context.to_page_graph()
        self._report(progress_callback, Milestone.DONE)
        return graph

    def _stylesheet_text(self, sheet: DiscoveredStylesheet) -> Optional[str]:
        if not sheet.is_external:
            return sheet.text
        css = self.config.load_stylesheet(sheet.href)
        if css is None:
            self._logger.debug(f"No text supplied for stylesheet {sheet.href!r}, not applied")
        return css

    @staticmethod
    def _report(progress_callback: Optional[ProgressCallback], milestone: Milestone) -> None:
        logger.debug(f"Milestone reached: {milestone} ({MILESTONE_PERCENT[milestone]}%)")
        if progress_callback is not None:
            progress_callback(milestone, MILESTONE_PERCENT[milestone])


def analyze_document(
    document: Union[str, bytes],
    config: AnalysisConfig | None = None,
    progress_callback: Optional[ProgressCallback] = None,
    on_complete: Optional[CompletionCallback] = None,
) -> PageGraph:
    """Analyze a document, raising on fatal failure."""
    result = AnalysisEngine(config).analyze(document, progress_callback, on_complete)
    if result.is_err():
        error = result.unwrap_err()
        if error.cause is not None:
            raise error.cause
        raise PageGraphError(error.message)
    return result.unwrap()
