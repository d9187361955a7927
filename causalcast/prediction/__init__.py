"""
causalcast/prediction/__init__.py

Shared chain-level result type passed from the predictor to the aggregator.
"""
from __future__ import annotations

from dataclasses import dataclass

from causalcast.graph.models import CausalChain


@dataclass(frozen=True)
class ChainPrediction:
    """Forecast derived from a single causal chain.

    Attributes:
        outcome:     Outcome label inferred from the chain.
        probability: Signal-adjusted probability, clamped to [0.1, 0.9].
        strength:    Raw chain strength, used as the aggregation weight.
        chain:       The causal chain the forecast came from.
        reasoning:   Human-readable rendering of the chain.
    """

    outcome: str
    probability: float
    strength: float
    chain: CausalChain
    reasoning: str
