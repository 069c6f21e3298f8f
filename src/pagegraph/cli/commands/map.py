"""
Map Command - Analyze an HTML document and write its page graph.

Linked stylesheets are read from disk relative to the document; remote
stylesheets are not fetched.
"""

import logging
import sys
import time
from contextlib import nullcontext
from pathlib import Path

import click
from pydantic import BaseModel

from ...config import DEFAULT_OUTPUT_FILE
from ...core.exceptions import InvalidDocumentError, PageGraphError
from ...parsing.engine import AnalysisConfig, AnalysisEngine, Milestone
from ..renderers import JsonRenderer
from ..utils import configure_logging, echo_error, echo_info, echo_success, echo_warning, file_stylesheet_loader

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_INVALID_INPUT = 2


# --- API Models ---
class MapSummary(BaseModel):
    """
    Structured response for the map command.
    """
    source: str
    output_path: str
    nodes_found: int
    edges_found: int
    scripts_stored: int
    parse_errors: int
    duration_sec: float


@click.command("map")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", default=DEFAULT_OUTPUT_FILE, help="Output graph JSON file")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed output")
@click.option("--no-scripts", is_flag=True, help="Record scripts without analyzing them")
@click.option("--no-styles", is_flag=True, help="Skip stylesheet resolution")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def map_page(
    html_file: str,
    output: str,
    verbose: bool,
    no_scripts: bool,
    no_styles: bool,
    as_json: bool,
):
    """
    Analyze an HTML file and build its page graph.

    Elements, inline styles, scripts, functions, variables, DOM writes and
    stylesheets become nodes; containment, data flow and rule application
    become edges.
    """
    configure_logging(verbose)
    source_path = Path(html_file)
    output_path = Path(output)
    renderer = JsonRenderer("map")

    context_manager = renderer.capture() if as_json else nullcontext()

    error_to_report = None
    response_data = None

    with context_manager:
        try:
            if not as_json:
                click.echo(f"🔍 Mapping {source_path}")

            config = AnalysisConfig(
                analyze_scripts=not no_scripts,
                resolve_styles=not no_styles,
                stylesheet_loader=file_stylesheet_loader(source_path.parent),
            )

            def progress(milestone: Milestone, percent: int):
                if not as_json and verbose:
                    click.echo(f"   [{percent:3d}%] {milestone}")

            start = time.perf_counter()
            result = AnalysisEngine(config).analyze(source_path.read_bytes(), progress_callback=progress)

            if result.is_err():
                error = result.unwrap_err()
                raise error.cause or PageGraphError(error.message)

            graph = result.unwrap()
            duration = time.perf_counter() - start

            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(graph.to_json(), encoding="utf-8")

            if not as_json:
                for issue in graph.errors:
                    echo_warning(f"{issue.kind} node {issue.node_id}: {issue.message}")
                echo_success("Map complete")
                click.echo(f"   Total Nodes: {len(graph.nodes)}")
                click.echo(f"   Total Edges: {len(graph.edges)}")
                echo_info(f"Written to {output_path}")

            response_data = MapSummary(
                source=str(source_path),
                output_path=str(output_path),
                nodes_found=len(graph.nodes),
                edges_found=len(graph.edges),
                scripts_stored=len(graph.script_contents),
                parse_errors=len(graph.errors),
                duration_sec=round(duration, 3),
            )

        except Exception as e:
            error_to_report = e

    exit_code = EXIT_INVALID_INPUT if isinstance(error_to_report, InvalidDocumentError) else EXIT_ERROR

    if as_json:
        if error_to_report:
            renderer.render_error(error_to_report)
            sys.exit(exit_code)
        elif response_data:
            renderer.render_success(response_data)
    elif error_to_report:
        if isinstance(error_to_report, InvalidDocumentError):
            echo_error(str(error_to_report))
        else:
            echo_error(f"Error: {error_to_report}")
        sys.exit(exit_code)
