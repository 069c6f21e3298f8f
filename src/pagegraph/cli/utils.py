"""
CLI Utilities - Shared helper functions for command line operations.

This module provides common functionality used across the CLI commands,
including formatted printing, logging setup, graph loading and the
filesystem stylesheet loader handed to the engine.
"""

import logging
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import urlparse

import click

from ..config import DEFAULT_OUTPUT_FILE
from ..core.types import PageGraph

logger = logging.getLogger(__name__)


def _emit(prefix: str, message: str, err: bool = False, **style) -> None:
    click.echo(click.style(f"{prefix} {message}", **style), err=err)


def echo_success(message: str) -> None:
    """Green check line, used once a command has written its output."""
    _emit("✅", message, fg="green")


def echo_error(message: str) -> None:
    """
    Red cross line on stderr.

    Args:
        message (str): Human-readable reason; fatal input errors already
            carry their "Invalid input:" prefix.
    """
    _emit("❌", message, err=True, fg="red")


def echo_warning(message: str) -> None:
    """Yellow line on stderr for scoped script and stylesheet failures."""
    _emit("⚠️ ", message, err=True, fg="yellow")


def echo_info(message: str) -> None:
    _emit("  ", message, dim=True)


def configure_logging(verbose: bool) -> None:
    """Send library logs to stderr; DEBUG when verbose, warnings otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="[%X]",
    )


def load_graph(graph_file: str) -> Optional[PageGraph]:
    """
    Load a PageGraph from a JSON file or a directory containing one.

    Args:
        graph_file (str): Path to a graph JSON file or a directory containing pagegraph.json.

    Returns:
        Optional[PageGraph]: The loaded graph, or None if loading failed.
    """
    graph_path = Path(graph_file)

    if graph_path.is_dir():
        graph_path = graph_path / DEFAULT_OUTPUT_FILE

    if not graph_path.exists():
        echo_error(f"Graph file not found: {graph_file}")
        click.echo("Run 'pagegraph map <file.html>' first to create it.")
        return None

    try:
        return PageGraph.from_json(graph_path.read_text(encoding="utf-8"))
    except Exception as e:
        echo_error(f"Failed to load graph: {e}")
        return None


def resolve_node_id(graph: PageGraph, node_ref: str) -> Optional[int]:
    """
    Resolve a node reference typed by the user.

    Accepts a numeric id, an exact node name, or a unique name substring.
    """
    if node_ref.isdigit() and graph.has_node(int(node_ref)):
        return int(node_ref)

    exact = [n.id for n in graph.nodes if n.name == node_ref]
    if exact:
        return exact[0]

    partial = [n.id for n in graph.nodes if node_ref.lower() in n.name.lower()]
    if len(partial) == 1:
        return partial[0]
    return None


def file_stylesheet_loader(base_dir: Path) -> Callable[[str], Optional[str]]:
    """
    Build a loader that reads linked stylesheets from disk.

    Only relative paths and file:// URLs are read; remote URLs are skipped.
    """

    def load(href: str) -> Optional[str]:
        parsed = urlparse(href)
        if parsed.scheme and parsed.scheme != "file":
            logger.debug(f"Remote stylesheet {href!r} skipped")
            return None
        path = Path(parsed.path)
        if not path.is_absolute():
            path = base_dir / path
        if not path.is_file():
            logger.debug(f"Stylesheet {href!r} not found at {path}")
            return None
        return path.read_text(encoding="utf-8", errors="replace")

    return load
