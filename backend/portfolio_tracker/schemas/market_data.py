"""Pydantic schemas for quote lookup and price refresh endpoints."""

from decimal import Decimal

from pydantic import BaseModel, Field


class QuoteRequest(BaseModel):
    """Symbols to look up."""

    symbols: list[str] = Field(..., description="Ticker symbols; at most 50 are processed")


class QuoteOut(BaseModel):
    """Outcome of looking up one symbol."""

    symbol: str
    price: Decimal | None = None
    change: Decimal | None = None
    change_percent: Decimal | None = None
    error: str | None = Field(None, description="Failure reason when no price was found")


class QuotesResponse(BaseModel):
    """Response for the quote lookup endpoint."""

    quotes: list[QuoteOut]


class HoldingUpdateError(BaseModel):
    """Details about a holding whose price could not be saved."""

    holding_id: int
    symbol: str = Field(..., description="Ticker symbol of the holding")
    error: str = Field(..., description="Database error message")


class ReconciliationResponse(BaseModel):
    """Response for price refresh endpoints."""

    status: str = Field(..., description="completed or failed")
    symbols_processed: int = 0
    holdings_updated: int = 0
    errors: list[HoldingUpdateError] = Field(default_factory=list)
