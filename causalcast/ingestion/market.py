"""Decoding of market-listing payloads supplied by the market data source.

Listing APIs nest per-outcome markets under ``markets`` and encode the
outcome labels and prices as JSON strings (``'["Yes", "No"]'``,
``'["0.62", "0.38"]'``) or, depending on the endpoint, as plain lists.
Only the first (main) market of an event is considered.
"""
from __future__ import annotations

import json
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

_DEFAULT_OUTCOMES: list[tuple[str, float]] = [("Yes", 0.5), ("No", 0.5)]


def _decode_list(value: Any) -> list[Any]:
    """Return *value* as a list, decoding JSON-encoded strings."""
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        decoded = json.loads(value)
        if isinstance(decoded, list):
            return decoded
    return []


def _to_price(value: Any) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    return max(0.0, min(1.0, price))


def main_market(payload: dict[str, Any]) -> dict[str, Any]:
    """Return the first nested market of an event payload, or an empty dict."""
    markets = payload.get("markets") or []
    if isinstance(markets, list) and markets and isinstance(markets[0], dict):
        return markets[0]
    return {}


def parse_outcomes(market: dict[str, Any]) -> list[tuple[str, float]]:
    """Decode (label, price) pairs from a single market payload.

    Falls back to Yes/No at 0.50 each when the labels are missing or
    cannot be decoded.  Prices missing for a label default to 0.0.

    Args:
        market: One entry of an event's ``markets`` list.

    Returns:
        Ordered list of (outcome label, implied probability) tuples.
    """
    try:
        labels = _decode_list(market.get("outcomes"))
        prices = _decode_list(market.get("outcomePrices"))
    except (json.JSONDecodeError, TypeError) as exc:
        logger.warning("market_outcomes_unparseable", error=str(exc))
        labels, prices = [], []

    if not labels:
        return list(_DEFAULT_OUTCOMES)

    return [
        (str(label), _to_price(prices[i]) if i < len(prices) else 0.0)
        for i, label in enumerate(labels)
    ]
