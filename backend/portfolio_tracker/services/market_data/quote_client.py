"""Yahoo Finance chart API client for latest stock and ETF prices.

Symbols without an exchange qualifier are treated as NSE listings and get the
configured suffix (``TCS`` -> ``TCS.NS``). Every outcome is returned as a
``QuoteResult``; this client never raises for upstream problems and never
touches the quote cache (the batch fetcher owns cache writes).
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import quote as url_quote

import httpx

from portfolio_tracker.config import settings
from portfolio_tracker.services.market_data.quote_types import (
    Quote,
    QuoteFailure,
    QuoteFailureReason,
    QuoteResult,
)
from portfolio_tracker.services.shared.http_client import (
    AsyncHTTPClient,
    HTTPClientError,
    HTTPTimeoutError,
)

logger = logging.getLogger(__name__)

_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
_HUNDRED = Decimal("100")


def _to_decimal(value: Any) -> Decimal | None:
    """Positive numeric JSON value as Decimal, anything else as None."""
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return None
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        return None
    if not number.is_finite() or number <= 0:
        return None
    return number


def parse_chart_payload(symbol: str, payload: Any) -> QuoteResult:
    """Extract price and day change from a chart API response body.

    Args:
        symbol: Symbol as requested by the caller (without exchange suffix)
        payload: Decoded JSON body

    Returns:
        Quote when ``meta.regularMarketPrice`` is a positive number,
        QuoteFailure otherwise
    """
    chart = payload.get("chart") if isinstance(payload, dict) else None
    if not isinstance(chart, dict):
        return QuoteFailure(symbol, QuoteFailureReason.MALFORMED_RESPONSE, "missing 'chart'")

    results = chart.get("result")
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        error = chart.get("error")
        detail = error.get("description") if isinstance(error, dict) else None
        return QuoteFailure(symbol, QuoteFailureReason.NO_DATA, detail or "empty chart result")

    meta = results[0].get("meta")
    if not isinstance(meta, dict):
        return QuoteFailure(symbol, QuoteFailureReason.MALFORMED_RESPONSE, "missing 'meta'")

    price = _to_decimal(meta.get("regularMarketPrice"))
    if price is None:
        return QuoteFailure(symbol, QuoteFailureReason.MISSING_PRICE, "no regularMarketPrice")

    previous_close = _to_decimal(meta.get("previousClose")) or _to_decimal(
        meta.get("chartPreviousClose")
    )
    if previous_close is None:
        return Quote(symbol=symbol, price=price)

    change = price - previous_close
    return Quote(
        symbol=symbol,
        price=price,
        change=change,
        change_percent=change / previous_close * _HUNDRED,
    )


class YahooChartClient(AsyncHTTPClient):
    """Client for the Yahoo Finance v8 chart endpoint.

    Usage:
        async with YahooChartClient() as client:
            result = await client.fetch_quote("TCS")
            if result.ok:
                print(result.price)
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        exchange_suffix: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        # A failed symbol is reported, not retried; the next refresh cycle tries again
        super().__init__(
            base_url=base_url or settings.quote_base_url,
            timeout=timeout if timeout is not None else settings.quote_request_timeout,
            max_retries=1,
            headers={"User-Agent": _USER_AGENT, "Accept": "application/json"},
            transport=transport,
        )
        self.exchange_suffix = (
            exchange_suffix if exchange_suffix is not None else settings.quote_exchange_suffix
        )

    def to_exchange_symbol(self, symbol: str) -> str:
        """Append the exchange suffix unless the symbol already carries one."""
        if "." in symbol:
            return symbol
        return f"{symbol}{self.exchange_suffix}"

    async def fetch_quote(self, symbol: str) -> QuoteResult:
        """Fetch the latest price for one symbol.

        Args:
            symbol: Ticker symbol, with or without exchange suffix

        Returns:
            Quote on success, QuoteFailure with a reason otherwise
        """
        exchange_symbol = self.to_exchange_symbol(symbol)
        path = f"/v8/finance/chart/{url_quote(exchange_symbol, safe='')}"

        try:
            payload = await self.get_json(path, params={"interval": "1d", "range": "1d"})
        except HTTPTimeoutError as e:
            result = QuoteFailure(symbol, QuoteFailureReason.TIMEOUT, str(e))
        except HTTPClientError as e:
            reason = (
                QuoteFailureReason.HTTP_ERROR
                if e.status_code is not None
                else QuoteFailureReason.NETWORK_ERROR
            )
            result = QuoteFailure(symbol, reason, str(e))
        except ValueError as e:
            result = QuoteFailure(symbol, QuoteFailureReason.MALFORMED_RESPONSE, str(e))
        else:
            result = parse_chart_payload(symbol, payload)

        if result.ok:
            logger.debug(f"Fetched {exchange_symbol}: {result.price}")
        else:
            logger.warning(
                f"No price for {exchange_symbol}: {result.reason.value} ({result.detail})"
            )
        return result
