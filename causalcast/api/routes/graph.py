"""
causalcast/api/routes/graph.py

Graph visualisation endpoint.

POST /graph
    Build the causal graph for an event from its sources and return it as
    nodes and edges, suitable for rendering in a graph visualisation
    library (e.g. D3, Cytoscape, Sigma).

    Nodes
    -----
      type="event"    — the market question (one node).
      type="source"   — one per supplied source.
      type="factor"   — extracted causes.
      type="outcome"  — extracted effects.

    Edges
    -----
      type="informs"    — source → event.
      type="causes"     — factor → outcome.
      type="influences" — factor → event.
"""
from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends

from causalcast.api.routes import prepared_request
from causalcast.forecast import build_graph
from causalcast.models.schemas.graph import GraphResponse
from causalcast.models.schemas.prediction import ForecastRequest

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=GraphResponse,
    summary="Build the causal graph for an event",
)
async def post_graph(
    request: ForecastRequest = Depends(prepared_request),
) -> GraphResponse:
    """Return the causal graph built from *request.sources* for *request.event*."""
    graph = await build_graph(request.sources, request.event)
    response = GraphResponse.from_graph(graph)

    logger.info(
        "graph_served",
        event_id=request.event.id,
        nodes=len(response.nodes),
        edges=len(response.edges),
        chains=len(response.metadata.causal_chains),
    )
    return response
