"""Prices API router - quote lookups and holding price refreshes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from portfolio_tracker.database import get_db
from portfolio_tracker.dependencies.auth import get_current_user_id, require_service_key
from portfolio_tracker.dependencies.market_data import get_price_fetcher
from portfolio_tracker.schemas import (
    HoldingUpdateError,
    QuoteOut,
    QuoteRequest,
    QuotesResponse,
    ReconciliationResponse,
)
from portfolio_tracker.services.market_data import BatchPriceFetcher, Quote
from portfolio_tracker.services.price_reconciliation_service import (
    PriceReconciliationJob,
    ReconciliationResult,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prices", tags=["prices"])


def _to_response(result: ReconciliationResult) -> ReconciliationResponse:
    if not result.succeeded:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Price refresh failed: {result.error}",
        )
    return ReconciliationResponse(
        status=result.status,
        symbols_processed=result.symbols_processed,
        holdings_updated=result.holdings_updated,
        errors=[
            HoldingUpdateError(holding_id=f.holding_id, symbol=f.symbol, error=f.error)
            for f in result.failures
        ],
    )


@router.post("/quotes", response_model=QuotesResponse)
async def get_quotes(
    request: QuoteRequest,
    fetcher: BatchPriceFetcher = Depends(get_price_fetcher),
    user_id: str = Depends(get_current_user_id),
):
    """
    Look up current prices for a list of symbols.

    Every processed symbol gets an entry: a price with day change, or the
    reason no price was found. At most 50 distinct symbols are processed.
    """
    symbols = [s.strip().upper() for s in request.symbols if s and s.strip()]
    if not symbols:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Symbols array is required"
        )

    results = await fetcher.fetch_quotes(symbols)

    quotes = []
    for result in results:
        if isinstance(result, Quote):
            quotes.append(
                QuoteOut(
                    symbol=result.symbol,
                    price=result.price,
                    change=result.change,
                    change_percent=result.change_percent,
                )
            )
        else:
            quotes.append(QuoteOut(symbol=result.symbol, error=result.reason.value))
    return QuotesResponse(quotes=quotes)


@router.post("/refresh", response_model=ReconciliationResponse)
async def refresh_my_prices(
    db: Session = Depends(get_db),
    fetcher: BatchPriceFetcher = Depends(get_price_fetcher),
    user_id: str = Depends(get_current_user_id),
):
    """Refresh stock and ETF prices for the current user's holdings."""
    result = await PriceReconciliationJob(db, fetcher).run(user_id=user_id)
    return _to_response(result)


@router.post(
    "/refresh-all",
    response_model=ReconciliationResponse,
    dependencies=[Depends(require_service_key)],
)
async def refresh_all_prices(
    db: Session = Depends(get_db),
    fetcher: BatchPriceFetcher = Depends(get_price_fetcher),
):
    """
    Refresh stock and ETF prices for every user (scheduled trigger).

    Requires the ``X-Service-Key`` header.
    """
    logger.info("Scheduled price refresh started")
    result = await PriceReconciliationJob(db, fetcher).run()
    return _to_response(result)
