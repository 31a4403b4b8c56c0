"""Pydantic schemas for API validation."""

from portfolio_tracker.schemas.common import MessageResponse
from portfolio_tracker.schemas.holding import (
    Holding,
    HoldingCreate,
    HoldingUpdate,
    HoldingWithValuation,
)
from portfolio_tracker.schemas.insights import Insight, InsightsResponse
from portfolio_tracker.schemas.market_data import (
    HoldingUpdateError,
    QuoteOut,
    QuoteRequest,
    QuotesResponse,
    ReconciliationResponse,
)
from portfolio_tracker.schemas.portfolio import (
    AssetTypeAllocation,
    PortfolioSummary,
    RebalanceCheckResponse,
    RebalanceResponse,
    SectorAllocation,
)

__all__ = [
    # Common schemas
    "MessageResponse",
    # Holding schemas
    "Holding",
    "HoldingCreate",
    "HoldingUpdate",
    "HoldingWithValuation",
    # Insight schemas
    "Insight",
    "InsightsResponse",
    # Market data schemas
    "HoldingUpdateError",
    "QuoteOut",
    "QuoteRequest",
    "QuotesResponse",
    "ReconciliationResponse",
    # Portfolio schemas
    "AssetTypeAllocation",
    "PortfolioSummary",
    "RebalanceCheckResponse",
    "RebalanceResponse",
    "SectorAllocation",
]
