"""
causalcast/api/middleware.py

Request context for the forecast API.

RequestContextMiddleware
    Gives every request an id (the caller's ``X-Request-ID`` when sent, a
    fresh uuid4 hex otherwise), binds it into the structlog context vars so
    route and engine log lines carry it, and echoes it on the response.

    One ``forecast_request`` line is written when the response is ready,
    carrying the event id and source count the routes record on
    ``request.state`` (see api/routes/__init__.py).  Health checks and
    OpenAPI assets are not logged.
"""
from __future__ import annotations

import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_UNLOGGED_PATHS: frozenset[str] = frozenset(
    {"/health", "/docs", "/redoc", "/openapi.json"}
)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log its forecast context."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        started = time.perf_counter()
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 2)

        response.headers[REQUEST_ID_HEADER] = request_id

        if request.url.path in _UNLOGGED_PATHS:
            return response

        state = request.state
        logger.info(
            "forecast_request",
            request_id=request_id,
            route=request.url.path,
            status_code=response.status_code,
            event_id=getattr(state, "event_id", None),
            sources=getattr(state, "source_count", None),
            duration_ms=elapsed_ms,
        )
        return response
