"""External market data: quote source, quote cache and batch fetching.

Usage:
    from portfolio_tracker.services.market_data import (
        BatchPriceFetcher,
        QuoteCache,
        YahooChartClient,
    )

    cache = QuoteCache(ttl_seconds=300)
    async with YahooChartClient() as client:
        prices = await BatchPriceFetcher(client, cache).fetch_prices(["TCS", "INFY"])
"""

from .price_fetcher import BatchPriceFetcher, QuoteSource
from .quote_cache import CachedQuote, QuoteCache
from .quote_client import YahooChartClient, parse_chart_payload
from .quote_types import Quote, QuoteFailure, QuoteFailureReason, QuoteResult

__all__ = [
    "BatchPriceFetcher",
    "CachedQuote",
    "Quote",
    "QuoteCache",
    "QuoteFailure",
    "QuoteFailureReason",
    "QuoteResult",
    "QuoteSource",
    "YahooChartClient",
    "parse_chart_payload",
]
