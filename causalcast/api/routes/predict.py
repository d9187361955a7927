"""
causalcast/api/routes/predict.py

Prediction endpoint.

POST /predict
    Build the causal graph for an event, forecast its outcomes from the
    causal chains, and return up to two predictions next to the market's
    own outcome prices.  The graph itself is included when
    ``include_graph`` is true.

An event with no usable sources still returns 200 with the neutral 50/50
fallback prediction.
"""
from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from causalcast.api.routes import prepared_request
from causalcast.forecast import run_forecast
from causalcast.models.schemas.graph import GraphResponse
from causalcast.models.schemas.prediction import ForecastRequest, ForecastResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ForecastResponse,
    summary="Forecast event outcomes from causal chains",
)
async def post_predict(
    request: ForecastRequest = Depends(prepared_request),
) -> ForecastResponse:
    result = await run_forecast(request.sources, request.event)
    event_node = result.graph.event_node

    response = ForecastResponse(
        event_id=request.event.id or (event_node.id if event_node else "event"),
        predictions=result.predictions,
        market_outcomes=list(request.event.outcomes),
        graph=GraphResponse.from_graph(result.graph) if request.include_graph else None,
    )

    logger.info(
        "predictions_served",
        event_id=response.event_id,
        predictions=len(response.predictions),
        top_outcome=response.predictions[0].outcome if response.predictions else None,
    )
    return response
