"""
causalcast/graph/builder.py

Assembles a CausalGraph from an event and its supporting sources.

Build order
-----------
1. One event node, id = event.id (or "event"), prefixed "event_" when it
   has the shape of a generated node id.
2. For each source, in input order:
     - a source node  ``source_{i}`` and an ``informs`` edge to the event;
     - causal relations extracted from the source text;
     - per relation ``j``: a factor node ``factor_{i}_{j}``, an outcome
       node ``outcome_{i}_{j}``, a ``causes`` edge factor → outcome and an
       ``influences`` edge factor → event.
3. Causal chains from every factor node to the event (graph metadata).

Node ids are scoped by source and relation index, so identical phrases in
different sources become distinct nodes.  The builder never mutates its
inputs and allocates a fresh graph on every call.
"""
from __future__ import annotations

import re

import structlog

from causalcast.config import settings
from causalcast.graph.models import (
    CausalGraph,
    EventNode,
    FactorNode,
    GraphEdge,
    GraphMetadata,
    GraphNode,
    OutcomeNode,
    SourceNode,
    truncate_label,
)
from causalcast.graph.paths import find_causal_chains
from causalcast.models.schemas.inputs import MarketEvent, SourceDocument
from causalcast.nlp.causal_extractor import CausalRelation, extract_causal_relations_sync

logger = structlog.get_logger(__name__)

_DEFAULT_EVENT_ID = "event"

# Shapes of the ids the builder generates for source, factor and outcome nodes.
_GENERATED_ID = re.compile(r"^(?:source_\d+|(?:factor|outcome)_\d+_\d+)$")

_EVENT_NODE_SIZE = 30.0
_SOURCE_NODE_SIZE = 15.0


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def relevance_of(source: SourceDocument) -> float:
    """Relevance score with absent/zero falling back to the default (0.5)."""
    return _clamp(source.relevance_score or settings.default_relevance)


def calculate_edge_weight(source: SourceDocument) -> float:
    """Weight of a source's ``informs`` edge.

    Relevance, boosted ×1.2 for recent sources and ×1.15 for trusted
    providers, capped at 1.0.
    """
    weight = relevance_of(source)
    if source.is_recent:
        weight *= settings.recency_boost
    if source.source in settings.trusted_sources:
        weight *= settings.trusted_source_boost
    return _clamp(weight)


def event_node_id(event: MarketEvent) -> str:
    """Node id for *event*: its own id, or "event" when it has none.

    An id shaped like a generated node id is prefixed with "event_" so the
    event node cannot be overwritten by a source, factor or outcome node.
    """
    event_id = event.id or _DEFAULT_EVENT_ID
    if _GENERATED_ID.match(event_id):
        logger.warning("event_id_namespaced", event_id=event_id)
        return f"event_{event_id}"
    return event_id


def _extracted_size(confidence: float) -> float:
    return 10.0 + confidence * 15.0


def _relation_nodes(
    rel: CausalRelation,
    source_idx: int,
    rel_idx: int,
) -> tuple[FactorNode, OutcomeNode]:
    common = {
        "size": _extracted_size(rel.confidence),
        "confidence": rel.confidence,
        "temporal": rel.temporal,
        "relation_type": rel.relation_type,
        "source_index": source_idx,
    }
    factor = FactorNode(
        id=f"factor_{source_idx}_{rel_idx}",
        label=truncate_label(rel.cause),
        **common,
    )
    outcome = OutcomeNode(
        id=f"outcome_{source_idx}_{rel_idx}",
        label=truncate_label(rel.effect),
        **common,
    )
    return factor, outcome


def build_causal_graph(
    sources: list[SourceDocument],
    event: MarketEvent,
) -> CausalGraph:
    """Build the causal graph for *event* from its supporting *sources*.

    Args:
        sources: Search results in ranking order; the order fixes node ids
                 and therefore which causal path the search finds first.
        event:   The market question being forecast.

    Returns:
        A new CausalGraph with exactly one event node.
    """
    event_id = event_node_id(event)
    nodes: dict[str, GraphNode] = {
        event_id: EventNode(
            id=event_id,
            label=truncate_label(event.title),
            size=_EVENT_NODE_SIZE,
            title=event.title,
            volume=event.volume or 0.0,
            liquidity=event.liquidity or 0.0,
            close_date=event.close_date,
        )
    }
    edges: list[GraphEdge] = []

    for idx, source in enumerate(sources):
        source_id = f"source_{idx}"
        nodes[source_id] = SourceNode(
            id=source_id,
            label=truncate_label(source.title or f"Source {idx + 1}"),
            size=_SOURCE_NODE_SIZE,
            url=source.url,
            relevance=relevance_of(source),
            provenance=source.source or "Unknown",
            is_recent=source.is_recent,
        )
        edges.append(
            GraphEdge(
                source=source_id,
                target=event_id,
                relation="informs",
                strength=relevance_of(source),
                weight=calculate_edge_weight(source),
            )
        )

        relations = extract_causal_relations_sync(source.text, source)
        for rel_idx, rel in enumerate(relations):
            factor, outcome = _relation_nodes(rel, idx, rel_idx)
            nodes.setdefault(factor.id, factor)
            nodes.setdefault(outcome.id, outcome)

            confidence = _clamp(rel.confidence)
            influence = _clamp(confidence * settings.influence_factor)
            edges.append(
                GraphEdge(
                    source=factor.id,
                    target=outcome.id,
                    relation="causes",
                    strength=confidence,
                    weight=confidence,
                    temporal=rel.temporal,
                    label=rel.relation_type,
                )
            )
            edges.append(
                GraphEdge(
                    source=factor.id,
                    target=event_id,
                    relation="influences",
                    strength=influence,
                    weight=influence,
                    temporal=rel.temporal,
                    label=rel.relation_type,
                )
            )

    node_list = tuple(nodes.values())
    chains = find_causal_chains(node_list, edges, event_id)

    relation_types: list[str] = []
    for edge in edges:
        if edge.relation not in relation_types:
            relation_types.append(edge.relation)

    metadata = GraphMetadata(
        total_sources=len(sources),
        total_edges=len(edges),
        entity_count=sum(isinstance(n, (FactorNode, OutcomeNode)) for n in node_list),
        relation_types=tuple(relation_types),
        causal_chains=tuple(chains),
    )

    logger.info(
        "causal_graph_built",
        event_id=event_id,
        sources=len(sources),
        nodes=len(node_list),
        edges=len(edges),
        chains=len(chains),
    )
    return CausalGraph(nodes=node_list, edges=tuple(edges), metadata=metadata)

