from causalcast.models.schemas.inputs import MarketEvent, MarketOutcome, SourceDocument
from causalcast.models.schemas.graph import (
    CausalChainOut,
    GraphEdgeOut,
    GraphMetadataOut,
    GraphNodeOut,
    GraphResponse,
)
from causalcast.models.schemas.prediction import ForecastRequest, ForecastResponse, Prediction

__all__ = [
    "MarketEvent",
    "MarketOutcome",
    "SourceDocument",
    "CausalChainOut",
    "GraphEdgeOut",
    "GraphMetadataOut",
    "GraphNodeOut",
    "GraphResponse",
    "ForecastRequest",
    "ForecastResponse",
    "Prediction",
]
