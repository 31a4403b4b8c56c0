"""Dependencies that hand out external-service clients per request."""

from collections.abc import AsyncIterator

from fastapi import Depends, HTTPException, Request, status

from portfolio_tracker.services.ai import AIGatewayClient, AIGatewayError
from portfolio_tracker.services.market_data import (
    BatchPriceFetcher,
    QuoteCache,
    YahooChartClient,
)


def get_quote_cache(request: Request) -> QuoteCache:
    """The process-wide quote cache built at startup."""
    return request.app.state.quote_cache


async def get_price_fetcher(
    cache: QuoteCache = Depends(get_quote_cache),
) -> AsyncIterator[BatchPriceFetcher]:
    """Batch fetcher backed by the chart API; the HTTP client is closed after the request."""
    async with YahooChartClient() as client:
        yield BatchPriceFetcher(client, cache)


async def get_ai_gateway() -> AsyncIterator[AIGatewayClient]:
    """Chat-completions client; 503 when no API key is configured."""
    try:
        gateway = AIGatewayClient()
    except AIGatewayError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e
    async with gateway:
        yield gateway


async def get_optional_ai_gateway() -> AsyncIterator[AIGatewayClient | None]:
    """Chat-completions client, or None when no API key is configured."""
    try:
        gateway = AIGatewayClient()
    except AIGatewayError:
        yield None
        return
    async with gateway:
        yield gateway
