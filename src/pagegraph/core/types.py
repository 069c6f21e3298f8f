"""
Core type definitions for pagegraph.

Nodes and edges are plain pydantic models so the analysis result can be
dumped to JSON for the presentation layer and loaded back for queries.
"""

import json
from enum import StrEnum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(StrEnum):
    """Categories of nodes in the page graph."""
    ELEMENT = "element"
    INLINE_STYLE = "inline-style"
    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    EXTERNAL_STYLE = "external-style"
    FUNCTION = "function"
    INPUT = "input"
    OUTPUT = "output"
    VARIABLE = "variable"
    DOM_CHANGE = "dom-change"


class EdgeKind(StrEnum):
    """Types of relationships between nodes."""
    STRUCTURAL = "structural"
    INPUT = "input"
    OUTPUT = "output"
    STYLESHEET_USE = "stylesheet-use"


class Node(BaseModel):
    """
    A structural or semantic entity extracted from the document.

    `id` is dense and assigned by the graph store; `name` is a label and
    is not unique.
    """
    id: int
    name: str
    kind: NodeKind
    content: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class Edge(BaseModel):
    """
    Directed relationship between two Nodes.

    `visible` belongs to the presentation layer and is the only mutable
    field; it is not part of the edge identity.
    """
    source: int
    target: int
    kind: EdgeKind
    label: Optional[str] = None
    visible: bool = True

    def identity(self) -> Tuple[int, int, str, Optional[str]]:
        return (self.source, self.target, self.kind.value, self.label)


class ParseIssue(BaseModel):
    """A scoped (non-fatal) failure attached to a script or stylesheet node."""
    node_id: int
    kind: NodeKind
    message: str


class PageGraph(BaseModel):
    """
    The completed analysis result handed to the presentation layer.

    Holds the ordered node and edge sequences, the script content store
    (script node id -> raw source) and any scoped parse issues.
    """
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    script_contents: Dict[int, str] = Field(default_factory=dict)
    errors: List[ParseIssue] = Field(default_factory=list)

    def get_node(self, node_id: int) -> Optional[Node]:
        """Retrieve a node by ID."""
        if 0 <= node_id < len(self.nodes) and self.nodes[node_id].id == node_id:
            return self.nodes[node_id]
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def has_node(self, node_id: int) -> bool:
        return self.get_node(node_id) is not None

    def nodes_by_kind(self, kind: NodeKind) -> List[Node]:
        """Get all nodes of a specific kind, in creation order."""
        return [n for n in self.nodes if n.kind == kind]

    def edges_by_kind(self, kind: EdgeKind) -> List[Edge]:
        return [e for e in self.edges if e.kind == kind]

    def parent_of(self, node_id: int) -> Optional[int]:
        for edge in self.edges:
            if edge.kind == EdgeKind.STRUCTURAL and edge.target == node_id:
                return edge.source
        return None

    def children_of(self, node_id: int) -> List[Node]:
        """Structural children of a node, in creation order."""
        return [
            self.nodes[e.target]
            for e in self.edges
            if e.kind == EdgeKind.STRUCTURAL and e.source == node_id
        ]

    def edges_for(self, node_id: int) -> List[Edge]:
        """All edges touching a node."""
        return [e for e in self.edges if e.source == node_id or e.target == node_id]

    def styles_for(self, node_id: int) -> List[Edge]:
        """Stylesheet-use edges that apply to an element."""
        return [
            e for e in self.edges
            if e.kind == EdgeKind.STYLESHEET_USE and e.target == node_id
        ]

    def script_source(self, node_id: int) -> Optional[str]:
        """Raw source of an inline script, for "inspect code" queries."""
        return self.script_contents.get(node_id)

    def identity(self) -> Tuple[Tuple[Any, ...], Tuple[Any, ...]]:
        """Node and edge sequences without presentation-only flags."""
        return (
            tuple((n.id, n.name, n.kind.value, n.content) for n in self.nodes),
            tuple(e.identity() for e in self.edges),
        )

    def get_stats(self) -> Dict[str, Any]:
        node_counts: Dict[str, int] = {}
        for node in self.nodes:
            node_counts[node.kind.value] = node_counts.get(node.kind.value, 0) + 1
        edge_counts: Dict[str, int] = {}
        for edge in self.edges:
            edge_counts[edge.kind.value] = edge_counts.get(edge.kind.value, 0) + 1
        return {
            "total_nodes": len(self.nodes),
            "total_edges": len(self.edges),
            "nodes_by_kind": node_counts,
            "edges_by_kind": edge_counts,
            "scripts_stored": len(self.script_contents),
            "parse_errors": len(self.errors),
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.model_dump(mode="json")
        data["stats"] = self.get_stats()
        return data

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageGraph":
        payload = {k: v for k, v in data.items() if k != "stats"}
        return cls.model_validate(payload)

    @classmethod
    def from_json(cls, text: str) -> "PageGraph":
        return cls.from_dict(json.loads(text))
