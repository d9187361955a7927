"""
causalcast/prediction/predictor.py

Turns the causal chains of a built graph into outcome forecasts.

Each chain is read as a small piece of evidence: nodes whose labels carry
positive words ("growth", "gain", …) push the probability up, nodes with
negative words ("decline", "loss", …) push it down, and the push is scaled
by the chain strength:

    probability = clamp(0.5 + (positive - negative) / len(path) * strength, 0.1, 0.9)

Chain forecasts are then pooled per outcome by the aggregator.
"""
from __future__ import annotations

import structlog

from causalcast.graph.models import CausalChain, CausalGraph, GraphNode, OutcomeNode
from causalcast.models.schemas.inputs import MarketEvent
from causalcast.models.schemas.prediction import Prediction
from causalcast.prediction import ChainPrediction
from causalcast.prediction.aggregator import (
    aggregate_predictions,
    clamp_probability,
    generate_fallback_prediction,
)

logger = structlog.get_logger(__name__)

_POSITIVE_WORDS: tuple[str, ...] = (
    "increase", "rise", "growth", "success", "positive", "gain", "improve", "boost",
)
_NEGATIVE_WORDS: tuple[str, ...] = (
    "decrease", "fall", "decline", "failure", "negative", "loss", "worsen", "drop",
)

_DEFAULT_OUTCOME = "Yes"
_BASE_PROBABILITY = 0.5


def is_positive_signal(node: GraphNode) -> bool:
    text = node.label.lower()
    return any(word in text for word in _POSITIVE_WORDS)


def is_negative_signal(node: GraphNode) -> bool:
    text = node.label.lower()
    return any(word in text for word in _NEGATIVE_WORDS)


def infer_outcome(path_nodes: list[GraphNode], graph: CausalGraph) -> str:
    """Pick the outcome label a chain argues for.

    The last path node when it is an outcome node; otherwise the first
    outcome node (edge-list order) reached by a direct edge from any path
    node; otherwise "Yes".
    """
    if not path_nodes:
        return _DEFAULT_OUTCOME

    last = path_nodes[-1]
    if isinstance(last, OutcomeNode) and last.label:
        return last.label

    path_ids = {n.id for n in path_nodes}
    for edge in graph.edges:
        if edge.source not in path_ids:
            continue
        target = graph.node(edge.target)
        if isinstance(target, OutcomeNode):
            return target.label or _DEFAULT_OUTCOME

    return _DEFAULT_OUTCOME


def generate_reasoning(chain: CausalChain, path_nodes: list[GraphNode]) -> str:
    """Render a chain as "Causal chain: Factor: A → B → Outcome: C. Strength: 72.0%"."""
    if not path_nodes:
        return "No causal path identified"

    last = len(path_nodes) - 1
    steps: list[str] = []
    for i, node in enumerate(path_nodes):
        if not node.label:
            continue
        if i == 0:
            steps.append(f"Factor: {node.label}")
        elif i == last:
            steps.append(f"→ Outcome: {node.label}")
        else:
            steps.append(f"→ {node.label}")

    return f"Causal chain: {' '.join(steps)}. Strength: {chain.strength * 100:.1f}%"


def predict_chain(chain: CausalChain, graph: CausalGraph) -> ChainPrediction | None:
    """Forecast from a single chain; None when none of its nodes resolve."""
    path_nodes = [n for n in (graph.node(node_id) for node_id in chain.path) if n is not None]
    if not path_nodes:
        return None

    positive = sum(1 for n in path_nodes if is_positive_signal(n))
    negative = sum(1 for n in path_nodes if is_negative_signal(n))
    signal_diff = (positive - negative) / max(len(path_nodes), 1)
    probability = clamp_probability(_BASE_PROBABILITY + signal_diff * chain.strength)

    return ChainPrediction(
        outcome=infer_outcome(path_nodes, graph),
        probability=probability,
        strength=chain.strength,
        chain=chain,
        reasoning=generate_reasoning(chain, path_nodes),
    )


def predict_from_causality(
    event: MarketEvent | None,
    graph: CausalGraph | None,
) -> list[Prediction]:
    """Forecast the event's outcomes from the causal chains of *graph*.

    Args:
        event: The event being forecast (used for logging only).
        graph: A graph from build_causal_graph; None or empty is tolerated.

    Returns:
        At most two predictions, or the single 50/50 fallback when the
        graph carries no usable causal chains.
    """
    event_id = event.id if event is not None else None

    if graph is None or not graph.nodes:
        logger.info("prediction_fallback", event_id=event_id, reason="empty_graph")
        return generate_fallback_prediction()

    chains = graph.metadata.causal_chains
    if not chains:
        logger.info("prediction_fallback", event_id=event_id, reason="no_causal_chains")
        return generate_fallback_prediction()

    chain_predictions = [
        pred for pred in (predict_chain(chain, graph) for chain in chains) if pred is not None
    ]
    if not chain_predictions:
        logger.info("prediction_fallback", event_id=event_id, reason="unresolved_chains")
        return generate_fallback_prediction()

    predictions = aggregate_predictions(chain_predictions)
    logger.info(
        "prediction_complete",
        event_id=event_id,
        chains=len(chains),
        predictions=len(predictions),
        top_probability=round(predictions[0].probability, 4),
    )
    return predictions
