"""Batch price fetching with a shared TTL cache."""

import asyncio
import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Protocol

from portfolio_tracker.config import settings
from portfolio_tracker.services.market_data.quote_cache import QuoteCache
from portfolio_tracker.services.market_data.quote_types import (
    Quote,
    QuoteFailure,
    QuoteFailureReason,
    QuoteResult,
)

logger = logging.getLogger(__name__)


class QuoteSource(Protocol):
    """Anything that can look up one symbol's latest price."""

    async def fetch_quote(self, symbol: str) -> QuoteResult: ...


class BatchPriceFetcher:
    """Resolve prices for a batch of symbols, cache first, network second.

    At most ``batch_limit`` distinct symbols are handled per call; the rest are
    dropped from that call, whether cached or not. Callers with more symbols
    must split them into chunks. Cache misses are fetched concurrently and the
    call returns once every fetch has finished, successfully or not. This class
    is the only writer to the cache.
    """

    def __init__(
        self,
        quote_source: QuoteSource,
        cache: QuoteCache,
        batch_limit: int | None = None,
    ) -> None:
        self._quote_source = quote_source
        self._cache = cache
        self.batch_limit = batch_limit if batch_limit is not None else settings.quote_batch_limit

    def _limit(self, symbols: Iterable[str]) -> list[str]:
        """Distinct, non-blank symbols in first-seen order, capped at batch_limit."""
        unique = list(dict.fromkeys(s.strip() for s in symbols if s and s.strip()))
        if len(unique) > self.batch_limit:
            logger.warning(
                f"Received {len(unique)} symbols, processing the first {self.batch_limit}"
            )
        return unique[: self.batch_limit]

    async def fetch_quotes(self, symbols: Iterable[str]) -> list[QuoteResult]:
        """Look up every symbol and report the outcome for each.

        Args:
            symbols: Ticker symbols; duplicates and blanks are ignored

        Returns:
            One result per processed symbol, in request order. Cache hits are
            returned as quotes without day change.
        """
        requested = self._limit(symbols)
        results: dict[str, QuoteResult] = {}
        misses: list[str] = []

        for symbol in requested:
            cached_price = self._cache.get(symbol)
            if cached_price is not None:
                logger.debug(f"Cache hit for {symbol}: {cached_price}")
                results[symbol] = Quote(symbol=symbol, price=cached_price)
            else:
                misses.append(symbol)

        if misses:
            logger.info(f"Fetching {len(misses)} prices ({len(results)} served from cache)")
            outcomes = await asyncio.gather(
                *(self._quote_source.fetch_quote(symbol) for symbol in misses),
                return_exceptions=True,
            )
            for symbol, outcome in zip(misses, outcomes, strict=True):
                if isinstance(outcome, Exception):
                    logger.error(f"Unexpected error fetching {symbol}: {outcome!r}")
                    outcome = QuoteFailure(
                        symbol, QuoteFailureReason.UNEXPECTED_ERROR, repr(outcome)
                    )
                elif isinstance(outcome, BaseException):
                    raise outcome

                if outcome.ok:
                    self._cache.put(symbol, outcome.price)
                results[symbol] = outcome

        return [results[symbol] for symbol in requested]

    async def fetch_prices(self, symbols: Iterable[str]) -> dict[str, Decimal]:
        """Map each symbol with a known price to that price.

        Symbols whose fetch failed are absent; callers treat a missing symbol
        as "price unchanged".
        """
        return {
            result.symbol: result.price
            for result in await self.fetch_quotes(symbols)
            if isinstance(result, Quote)
        }
