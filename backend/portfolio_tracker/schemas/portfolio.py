"""Pydantic schemas for portfolio summary and rebalance endpoints."""

from decimal import Decimal

from pydantic import BaseModel, Field

from portfolio_tracker.schemas.holding import HoldingWithValuation


class SectorAllocation(BaseModel):
    """One slice of the sector pie."""

    name: str
    percentage: int = Field(..., description="Whole-number share of total value")
    color: str
    value: Decimal


class AssetTypeAllocation(BaseModel):
    """Value held in one instrument category."""

    asset_type: str
    value: Decimal
    percentage: Decimal


class PortfolioSummary(BaseModel):
    """Totals and breakdowns for the current user's portfolio."""

    total_value: Decimal
    total_invested: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    holdings_count: int
    sector_allocation: list[SectorAllocation]
    asset_type_allocation: list[AssetTypeAllocation]
    holdings: list[HoldingWithValuation]


class RebalanceResponse(BaseModel):
    """Rule-based recommendations for one user."""

    user_id: str
    recommendations: list[str]


class RebalanceCheckResponse(BaseModel):
    """Result of checking every user's portfolio."""

    users_checked: int
    users_flagged: int
    reports: list[RebalanceResponse]
    ai_summary: str | None = Field(None, description="Short AI summary of the flagged portfolios")
