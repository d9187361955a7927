"""Forecast orchestrator.

Chains the engine stages for one request:
  1. Graph building      (graph/builder.py — extraction runs per source)
  2. Chain prediction    (prediction/predictor.py)
  3. Aggregation         (prediction/aggregator.py)

Every run allocates a fresh graph; nothing is kept between calls, so
concurrent requests never share state.
"""

import asyncio
from dataclasses import dataclass, field

import structlog

from causalcast.graph.builder import build_causal_graph
from causalcast.graph.models import CausalGraph
from causalcast.models.schemas.inputs import MarketEvent, SourceDocument
from causalcast.models.schemas.prediction import Prediction
from causalcast.prediction.predictor import predict_from_causality

logger = structlog.get_logger(__name__)


@dataclass
class ForecastResult:
    """The graph built for a request and the predictions drawn from it."""

    graph: CausalGraph
    predictions: list[Prediction] = field(default_factory=list)


def run_forecast_sync(
    sources: list[SourceDocument],
    event: MarketEvent,
) -> ForecastResult:
    """Build the causal graph for *event* and predict from it.

    Designed to be called inside a thread-pool executor (via run_forecast)
    so that the CPU-bound pattern matching does not block the event loop.
    """
    log = logger.bind(event_id=event.id, sources=len(sources))

    log.debug("forecast_stage", stage="graph")
    graph = build_causal_graph(sources, event)

    log.debug("forecast_stage", stage="predict")
    predictions = predict_from_causality(event, graph)

    log.info(
        "forecast_complete",
        nodes=len(graph.nodes),
        edges=len(graph.edges),
        chains=len(graph.metadata.causal_chains),
        predictions=len(predictions),
    )
    return ForecastResult(graph=graph, predictions=predictions)


async def run_forecast(
    sources: list[SourceDocument],
    event: MarketEvent,
) -> ForecastResult:
    """Async entry point; offloads the whole forecast to one worker thread."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, run_forecast_sync, sources, event)


async def build_graph(
    sources: list[SourceDocument],
    event: MarketEvent,
) -> CausalGraph:
    """Async graph-only entry point (no prediction)."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, build_causal_graph, sources, event)
