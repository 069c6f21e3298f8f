"""
Inspect Command - Show one node, its edges and its code.
"""

import sys
from typing import List, Optional

import click
from pydantic import BaseModel, Field

from ...config import DEFAULT_OUTPUT_FILE
from ...core.exceptions import GraphNotFoundError, NodeNotFoundError
from ...core.types import Edge, Node, NodeKind
from ..renderers import JsonRenderer
from ..utils import echo_error, load_graph, resolve_node_id


# --- API Models ---
class InspectResponse(BaseModel):
    node: Node
    parent: Optional[int] = None
    edges: List[Edge] = Field(default_factory=list)
    source: Optional[str] = None


@click.command()
@click.argument("node_ref")
@click.option("-g", "--graph", "graph_file", default=DEFAULT_OUTPUT_FILE,
              help="Path to graph JSON file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def inspect(node_ref: str, graph_file: str, as_json: bool) -> None:
    """
    Inspect a node by id or name.

    For inline scripts the stored source is printed; for other nodes the
    captured content is shown.
    """
    renderer = JsonRenderer("inspect")

    if as_json:
        error_to_report = None
        response_data = None
        with renderer.capture():
            try:
                graph = load_graph(graph_file)
                if graph is None:
                    raise GraphNotFoundError(graph_file)
                node_id = resolve_node_id(graph, node_ref)
                if node_id is None:
                    raise NodeNotFoundError(node_ref)
                response_data = _build_response(graph, node_id)
            except Exception as e:
                error_to_report = e

        if error_to_report:
            renderer.render_error(error_to_report)
            sys.exit(1)
        renderer.render_success(response_data)
        return

    graph = load_graph(graph_file)
    if graph is None:
        sys.exit(1)

    node_id = resolve_node_id(graph, node_ref)
    if node_id is None:
        echo_error(f"Node not found: {node_ref}")
        sys.exit(1)

    response = _build_response(graph, node_id)
    node = response.node

    click.echo()
    click.echo(f"🔎 {click.style(node.name, bold=True)}  [{node.kind}]  id={node.id}")
    click.echo("═" * 60)
    if response.parent is not None:
        parent = graph.get_node(response.parent)
        click.echo(f"Parent: {parent.name} (id={parent.id})")

    outgoing = [e for e in response.edges if e.source == node.id]
    incoming = [e for e in response.edges if e.target == node.id]
    for title, edges, other_end in (
        ("Outgoing", outgoing, lambda e: e.target),
        ("Incoming", incoming, lambda e: e.source),
    ):
        if not edges:
            continue
        click.echo(f"{title}:")
        for edge in edges:
            other = graph.get_node(other_end(edge))
            label = f"  \"{edge.label}\"" if edge.label else ""
            click.echo(f"  ├─ {edge.kind:<15} {other.name} (id={other.id}){label}")

    body = response.source if response.source is not None else node.content
    if body:
        click.echo()
        click.echo(click.style("Code:" if node.kind == NodeKind.SCRIPT else "Content:", bold=True))
        click.echo(body)


def _build_response(graph, node_id: int) -> InspectResponse:
    node = graph.get_node(node_id)
    return InspectResponse(
        node=node,
        parent=graph.parent_of(node_id),
        edges=graph.edges_for(node_id),
        source=graph.script_source(node_id),
    )
