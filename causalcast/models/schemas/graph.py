from typing import Any

from pydantic import BaseModel, Field

from causalcast.graph.models import CausalGraph


class GraphNodeOut(BaseModel):
    """A node in the causal graph."""
    id: str
    label: str
    type: str = Field(..., description="event, source, factor or outcome")
    size: float
    color: str
    properties: dict[str, Any] = Field(default_factory=dict)


class GraphEdgeOut(BaseModel):
    """An edge in the causal graph."""
    source: str
    target: str
    type: str = Field(..., description="informs, causes or influences")
    strength: float = Field(..., ge=0.0, le=1.0)
    weight: float = Field(..., ge=0.0, le=1.0)
    temporal: str | None = None
    label: str | None = None


class CausalChainOut(BaseModel):
    """A ranked causal path from a factor node to the event node."""
    start: str
    end: str
    path: list[str]
    length: int
    strength: float


class GraphMetadataOut(BaseModel):
    total_sources: int
    total_edges: int
    entity_count: int
    relation_types: list[str] = Field(default_factory=list)
    causal_chains: list[CausalChainOut] = Field(default_factory=list)


class GraphResponse(BaseModel):
    """Causal graph response for visualization."""
    nodes: list[GraphNodeOut]
    edges: list[GraphEdgeOut]
    metadata: GraphMetadataOut

    @classmethod
    def from_graph(cls, graph: CausalGraph) -> "GraphResponse":
        meta = graph.metadata
        return cls(
            nodes=[
                GraphNodeOut(
                    id=n.id,
                    label=n.label,
                    type=n.kind,
                    size=n.size,
                    color=n.color,
                    properties=n.properties(),
                )
                for n in graph.nodes
            ],
            edges=[
                GraphEdgeOut(
                    source=e.source,
                    target=e.target,
                    type=e.relation,
                    strength=e.strength,
                    weight=e.weight,
                    temporal=e.temporal,
                    label=e.label,
                )
                for e in graph.edges
            ],
            metadata=GraphMetadataOut(
                total_sources=meta.total_sources,
                total_edges=meta.total_edges,
                entity_count=meta.entity_count,
                relation_types=list(meta.relation_types),
                causal_chains=[
                    CausalChainOut(
                        start=c.start,
                        end=c.end,
                        path=list(c.path),
                        length=c.length,
                        strength=c.strength,
                    )
                    for c in meta.causal_chains
                ],
            ),
        )
