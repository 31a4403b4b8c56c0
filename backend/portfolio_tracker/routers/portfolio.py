"""Portfolio API router - summary and rebalancing recommendations."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies.auth import get_current_user_id, require_service_key
from portfolio_tracker.dependencies.market_data import get_optional_ai_gateway
from portfolio_tracker.routers.holdings import holding_with_valuation
from portfolio_tracker.schemas import (
    AssetTypeAllocation,
    PortfolioSummary,
    RebalanceCheckResponse,
    RebalanceResponse,
    SectorAllocation,
)
from portfolio_tracker.services.ai import AIGatewayClient, summarize_rebalance
from portfolio_tracker.services.portfolio import check_all_users, check_portfolio, value_portfolio
from portfolio_tracker.services.repositories import HoldingRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/portfolio", tags=["portfolio"])


@router.get("/summary", response_model=PortfolioSummary)
async def get_portfolio_summary(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """
    Portfolio totals for the current user.

    Returns total value, invested amount, P&L, the sector allocation with
    chart colors, the asset-type breakdown and every holding with its
    valuation fields.
    """
    holdings = HoldingRepository(db).list_for_user(user_id)
    valuation = value_portfolio(holdings)

    return PortfolioSummary(
        total_value=valuation.total_value,
        total_invested=valuation.total_invested,
        total_pnl=valuation.total_pnl,
        total_pnl_percent=valuation.total_pnl_percent,
        holdings_count=len(holdings),
        sector_allocation=[
            SectorAllocation(
                name=entry.name,
                percentage=entry.percentage,
                color=entry.color,
                value=entry.value,
            )
            for entry in valuation.sector_allocation
        ],
        asset_type_allocation=[
            AssetTypeAllocation(
                asset_type=entry.asset_type,
                value=entry.value,
                percentage=entry.percentage,
            )
            for entry in valuation.asset_type_allocation
        ],
        holdings=[holding_with_valuation(h) for h in holdings],
    )


@router.get("/rebalance", response_model=RebalanceResponse)
async def get_rebalance_recommendations(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Rule-based rebalancing recommendations for the current user."""
    holdings = HoldingRepository(db).list_for_user(user_id)
    return RebalanceResponse(user_id=user_id, recommendations=check_portfolio(holdings))


@router.post(
    "/rebalance-check",
    response_model=RebalanceCheckResponse,
    dependencies=[Depends(require_service_key)],
)
async def run_rebalance_check(
    db: Session = Depends(get_db),
    gateway: AIGatewayClient | None = Depends(get_optional_ai_gateway),
):
    """
    Check every user's portfolio (scheduled weekly).

    Only users with at least one recommendation are listed. When an AI
    gateway key is configured the flagged recommendations are also
    summarized; a failed summary leaves ``ai_summary`` empty.
    """
    holdings = HoldingRepository(db).list_all()
    reports = check_all_users(holdings)
    users_checked = len({h.user_id for h in holdings})
    logger.info(f"Rebalance check: {len(reports)} of {users_checked} users flagged")

    return RebalanceCheckResponse(
        users_checked=users_checked,
        users_flagged=len(reports),
        reports=[
            RebalanceResponse(user_id=r.user_id, recommendations=r.recommendations)
            for r in reports
        ],
        ai_summary=await summarize_rebalance(reports, gateway),
    )
