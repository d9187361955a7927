"""
causalcast/api/routes/__init__.py

Shared FastAPI dependencies used across all route modules.
"""
from fastapi import Request

from causalcast.ingestion.normalizer import prepare_sources
from causalcast.models.schemas.prediction import ForecastRequest


async def prepared_request(body: ForecastRequest, request: Request) -> ForecastRequest:
    """FastAPI dependency returning the request with normalized source text.

    Also records the event id and source count on ``request.state`` for the
    request log line.  The engine consumes the returned copy; the parsed
    body is left as sent.
    """
    request.state.event_id = body.event.id
    request.state.source_count = len(body.sources)
    return body.model_copy(update={"sources": prepare_sources(body.sources)})
