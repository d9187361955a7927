"""
causalcast/prediction/aggregator.py

Merges chain-level forecasts into the final ranked prediction set.

Chains that predict the same outcome label are pooled: the probability is
the strength-weighted mean of their probabilities, the confidence score is
their mean strength, and the reasoning strings are joined.  The best two
outcomes are returned with a symmetric ±0.15 confidence interval.
"""
from __future__ import annotations

import structlog

from causalcast.config import settings
from causalcast.models.schemas.prediction import Prediction
from causalcast.prediction import ChainPrediction

logger = structlog.get_logger(__name__)

_FALLBACK_REASONING = "Insufficient causal data for prediction"
_DEFAULT_REASONING = "Based on causal analysis"


def confidence_label(score: float) -> str:
    """Map a mean chain strength to High / Medium / Low."""
    if score > 0.7:
        return "High"
    if score > 0.5:
        return "Medium"
    return "Low"


def clamp_probability(value: float) -> float:
    return max(settings.probability_floor, min(settings.probability_ceiling, value))


def _interval(probability: float) -> tuple[float, float]:
    half = settings.interval_half_width
    return max(0.0, probability - half), min(1.0, probability + half)


def generate_fallback_prediction() -> list[Prediction]:
    """The neutral 50/50 forecast used when there is no causal evidence."""
    lower, upper = (round(bound, 4) for bound in _interval(0.5))
    return [
        Prediction(
            outcome="Yes",
            probability=0.5,
            confidence="Low",
            confidence_score=0.0,
            ci_lower=lower,
            ci_upper=upper,
            reasoning=_FALLBACK_REASONING,
            causal_chains=0,
        )
    ]


def aggregate_predictions(predictions: list[ChainPrediction]) -> list[Prediction]:
    """Group chain forecasts by outcome and return the top two.

    Args:
        predictions: Chain-level forecasts in chain-ranking order.

    Returns:
        Up to ``settings.max_predictions`` predictions sorted by descending
        probability, or the fallback forecast when nothing can be pooled.
    """
    grouped: dict[str, list[ChainPrediction]] = {}
    for pred in predictions:
        if not pred.outcome:
            continue
        grouped.setdefault(pred.outcome, []).append(pred)

    aggregated: list[Prediction] = []
    for outcome, preds in grouped.items():
        total_weight = sum(p.strength for p in preds)
        if total_weight <= 0:
            continue

        weighted = sum(p.probability * p.strength for p in preds) / total_weight
        probability = clamp_probability(weighted)
        mean_strength = min(1.0, total_weight / len(preds))
        reasoning = "; ".join(p.reasoning for p in preds if p.reasoning)
        lower, upper = _interval(probability)

        aggregated.append(
            Prediction(
                outcome=outcome,
                probability=probability,
                confidence=confidence_label(mean_strength),
                confidence_score=mean_strength,
                ci_lower=lower,
                ci_upper=upper,
                reasoning=reasoning or _DEFAULT_REASONING,
                causal_chains=len(preds),
            )
        )

    if not aggregated:
        logger.info("prediction_aggregation_empty", chain_predictions=len(predictions))
        return generate_fallback_prediction()

    aggregated.sort(key=lambda p: p.probability, reverse=True)
    top = aggregated[: settings.max_predictions]

    logger.debug(
        "predictions_aggregated",
        chain_predictions=len(predictions),
        outcomes=len(aggregated),
        returned=len(top),
    )
    return top
