"""AI insights API router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies.auth import get_current_user_id
from portfolio_tracker.dependencies.market_data import get_ai_gateway
from portfolio_tracker.rate_limiter import limiter
from portfolio_tracker.schemas import InsightsResponse
from portfolio_tracker.services.ai import (
    UNAVAILABLE_INSIGHT,
    AIGatewayClient,
    AIGatewayCreditsError,
    AIGatewayError,
    AIGatewayRateLimitError,
    generate_insights,
)
from portfolio_tracker.services.repositories import HoldingRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.post("", response_model=InsightsResponse)
@limiter.limit("10/minute")
async def get_portfolio_insights(
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
    gateway: AIGatewayClient = Depends(get_ai_gateway),
):
    """
    Generate AI insights for the current user's portfolio.

    Gateway rate limits and exhausted credits surface as 429 and 402. Any
    other gateway failure returns 500 with a fallback insight in the body.
    """
    holdings = HoldingRepository(db).list_for_user(user_id)

    try:
        insights = await generate_insights(holdings, gateway)
    except AIGatewayRateLimitError as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(e)) from e
    except AIGatewayCreditsError as e:
        raise HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail=str(e)) from e
    except AIGatewayError as e:
        logger.error(f"Portfolio insights failed for user {user_id}: {e}")
        body = InsightsResponse(insights=[UNAVAILABLE_INSIGHT], error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(mode="json"),
        )

    return InsightsResponse(insights=insights)
