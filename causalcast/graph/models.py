"""
causalcast/graph/models.py

In-memory causal graph built for a single prediction request.

Node kinds
----------
  event    — the market question being forecast (exactly one per graph).
  source   — a search result that informs the event.
  factor   — an extracted cause phrase.
  outcome  — an extracted effect phrase.

Edge relations
--------------
  (source)-[informs]->(event)
  (factor)-[causes]->(outcome)
  (factor)-[influences]->(event)

Nodes and edges are frozen dataclasses; a graph is assembled once by the
builder and never updated afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property
from typing import Any, ClassVar

_LABEL_CHARS = 40

# Display colour per node kind for the presentation layer.
_KIND_COLORS: dict[str, str] = {
    "event":   "#4ec9b0",
    "source":  "#569cd6",
    "factor":  "#b5cea8",
    "outcome": "#c586c0",
}


def truncate_label(text: str) -> str:
    """Shorten *text* to the 40-character display label."""
    return text[:_LABEL_CHARS]


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GraphNode:
    """Fields shared by every node kind."""

    kind: ClassVar[str] = ""

    id: str
    label: str
    size: float

    @property
    def color(self) -> str:
        return _KIND_COLORS.get(self.kind, "#858585")

    def properties(self) -> dict[str, Any]:
        """Kind-specific attributes as a flat mapping for serialisation."""
        return {}


@dataclass(frozen=True)
class EventNode(GraphNode):
    kind: ClassVar[str] = "event"

    title: str = ""
    volume: float = 0.0
    liquidity: float = 0.0
    close_date: datetime | None = None

    def properties(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "volume": self.volume,
            "liquidity": self.liquidity,
            "close_date": self.close_date.isoformat() if self.close_date else None,
        }


@dataclass(frozen=True)
class SourceNode(GraphNode):
    kind: ClassVar[str] = "source"

    url: str | None = None
    relevance: float = 0.5
    provenance: str = "Unknown"
    is_recent: bool = False

    def properties(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "relevance": self.relevance,
            "provenance": self.provenance,
            "is_recent": self.is_recent,
        }


@dataclass(frozen=True)
class _ExtractedNode(GraphNode):
    """Base for nodes created from an extracted causal relation."""

    confidence: float = 0.0
    temporal: str = "unknown"
    relation_type: str = "direct"
    source_index: int = 0

    def properties(self) -> dict[str, Any]:
        return {
            "confidence": self.confidence,
            "temporal": self.temporal,
            "relation_type": self.relation_type,
            "source_index": self.source_index,
        }


@dataclass(frozen=True)
class FactorNode(_ExtractedNode):
    kind: ClassVar[str] = "factor"


@dataclass(frozen=True)
class OutcomeNode(_ExtractedNode):
    kind: ClassVar[str] = "outcome"


# ---------------------------------------------------------------------------
# Edges and chains
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GraphEdge:
    """A directed, weighted relation between two node ids."""

    source: str
    target: str
    relation: str               # informs | causes | influences
    strength: float             # [0.0 – 1.0]
    weight: float               # [0.0 – 1.0], may exceed strength after boosting
    temporal: str | None = None
    label: str | None = None


@dataclass(frozen=True)
class CausalChain:
    """An acyclic path from a factor node to the event node."""

    start: str
    end: str
    path: tuple[str, ...]
    strength: float

    @property
    def length(self) -> int:
        return len(self.path)


@dataclass(frozen=True)
class GraphMetadata:
    total_sources: int = 0
    total_edges: int = 0
    entity_count: int = 0
    relation_types: tuple[str, ...] = ()
    causal_chains: tuple[CausalChain, ...] = ()


@dataclass(frozen=True)
class CausalGraph:
    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]
    metadata: GraphMetadata = field(default_factory=GraphMetadata)

    def node(self, node_id: str) -> GraphNode | None:
        """Return the node with *node_id*, or None."""
        return self._node_index.get(node_id)

    @cached_property
    def _node_index(self) -> dict[str, GraphNode]:
        return {n.id: n for n in self.nodes}

    @property
    def event_node(self) -> EventNode | None:
        for node in self.nodes:
            if isinstance(node, EventNode):
                return node
        return None
