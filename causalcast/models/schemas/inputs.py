from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from causalcast.config import settings
from causalcast.ingestion.market import main_market, parse_outcomes
from causalcast.nlp.temporal import is_recent, parse_timestamp


class SourceDocument(BaseModel):
    """A search result used as raw material for causal extraction."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str | None = None
    url: str | None = None
    text: str = ""
    relevance_score: float | None = Field(
        default=None,
        alias="relevanceScore",
        description="Pertinence to the event; clamped to [0, 1] by the engine",
    )
    is_recent: bool = Field(default=False, alias="isRecent")
    source: str | None = Field(default=None, description="Provenance label, e.g. 'Exa AI'")
    published_at: datetime | None = Field(default=None, alias="publishedAt")

    @model_validator(mode="before")
    @classmethod
    def _derive_recency(cls, data: Any) -> Any:
        """Fill in is_recent from the publication date when not supplied."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        published = parse_timestamp(data.get("publishedAt", data.get("published_at")))
        data.pop("publishedAt", None)
        data["published_at"] = published
        if data.get("isRecent") is None and data.get("is_recent") is None:
            data.pop("isRecent", None)
            data["is_recent"] = is_recent(published, settings.recent_window_days)
        return data

    @field_validator("text", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class MarketOutcome(BaseModel):
    """One tradable outcome of a market and its implied probability."""
    label: str
    price: float = Field(..., ge=0.0, le=1.0)


class MarketEvent(BaseModel):
    """The prediction-market question being forecast.

    Accepts either the flat shape (``id``, ``title``, ``closeDate``,
    ``outcomes``) or a raw market-listing payload with ``endDate`` and a
    nested ``markets`` list carrying JSON-encoded outcome labels and prices.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str | None = None
    title: str = ""
    volume: float | None = None
    liquidity: float | None = None
    close_date: datetime | None = Field(default=None, alias="closeDate")
    outcomes: list[MarketOutcome] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _from_listing(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        market = main_market(data)

        raw_close = data.pop("closeDate", None) or data.pop("close_date", None)
        raw_close = raw_close or data.get("endDate") or market.get("endDate")
        data["close_date"] = parse_timestamp(raw_close)

        if data.get("id") is not None:
            data["id"] = str(data["id"])
        if not data.get("title"):
            data["title"] = data.get("question") or market.get("question") or ""

        if not data.get("outcomes") and market:
            data["outcomes"] = [
                {"label": label, "price": price} for label, price in parse_outcomes(market)
            ]
        return data
