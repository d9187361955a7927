from pydantic import BaseModel, Field

from causalcast.models.schemas.graph import GraphResponse
from causalcast.models.schemas.inputs import MarketEvent, MarketOutcome, SourceDocument


class Prediction(BaseModel):
    """A forecast for one outcome of the event."""
    outcome: str
    probability: float = Field(..., ge=0.0, le=1.0)
    confidence: str = Field(..., description="High, Medium or Low")
    confidence_score: float = Field(
        ..., ge=0.0, le=1.0, description="Mean strength of the contributing causal chains"
    )
    ci_lower: float = Field(..., ge=0.0, le=1.0)
    ci_upper: float = Field(..., ge=0.0, le=1.0)
    reasoning: str
    causal_chains: int = Field(default=0, ge=0, description="Number of contributing causal chains")


class ForecastRequest(BaseModel):
    """Request body for graph building and prediction."""
    event: MarketEvent
    sources: list[SourceDocument] = Field(default_factory=list)
    include_graph: bool = Field(default=False, description="Return the causal graph with the predictions")


class ForecastResponse(BaseModel):
    """Predictions for an event, alongside the market's own prices."""
    event_id: str
    predictions: list[Prediction]
    market_outcomes: list[MarketOutcome] = Field(default_factory=list)
    graph: GraphResponse | None = None
