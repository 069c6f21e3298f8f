"""
Stats Command - Summarize a page graph by node and edge kind.
"""

import sys

import click
from rich.console import Console
from rich.table import Table

from ...config import DEFAULT_OUTPUT_FILE
from ...core.types import EdgeKind, NodeKind
from ..utils import load_graph

console = Console()


@click.command()
@click.option("-g", "--graph", "graph_file", default=DEFAULT_OUTPUT_FILE,
              help="Path to graph JSON file")
def stats(graph_file: str) -> None:
    """
    Show node and edge counts by kind.
    """
    graph = load_graph(graph_file)
    if graph is None:
        sys.exit(1)

    summary = graph.get_stats()

    nodes_table = Table(title="Nodes", show_footer=True)
    nodes_table.add_column("Kind", footer="total")
    nodes_table.add_column("Count", justify="right", footer=str(summary["total_nodes"]))
    for kind in NodeKind:
        count = summary["nodes_by_kind"].get(kind.value, 0)
        if count:
            nodes_table.add_row(kind.value, str(count))

    edges_table = Table(title="Edges", show_footer=True)
    edges_table.add_column("Kind", footer="total")
    edges_table.add_column("Count", justify="right", footer=str(summary["total_edges"]))
    for kind in EdgeKind:
        count = summary["edges_by_kind"].get(kind.value, 0)
        if count:
            edges_table.add_row(kind.value, str(count))

    console.print(nodes_table)
    console.print(edges_table)
    console.print(f"Scripts stored: [cyan]{summary['scripts_stored']}[/cyan]")
    if summary["parse_errors"]:
        console.print(f"[yellow]Parse errors: {summary['parse_errors']}[/yellow]")
        for issue in graph.errors:
            console.print(f"  [yellow]{issue.kind} node {issue.node_id}:[/yellow] {issue.message}")
