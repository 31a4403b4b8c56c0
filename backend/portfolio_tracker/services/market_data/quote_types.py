"""Quote results returned by the quote source.

A lookup either produces a ``Quote`` or a ``QuoteFailure``; callers branch on
``result.ok`` (or ``isinstance``) instead of catching exceptions.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Literal


class QuoteFailureReason(StrEnum):
    """Why a quote could not be produced."""

    HTTP_ERROR = "http_error"  # upstream answered with a non-2xx status
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    MALFORMED_RESPONSE = "malformed_response"  # body was not the expected JSON shape
    NO_DATA = "no_data"  # symbol unknown upstream, empty chart result
    MISSING_PRICE = "missing_price"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True)
class Quote:
    """Latest price for a symbol.

    ``change`` and ``change_percent`` are None when the upstream had no
    previous close, or when the price came from the cache.
    """

    symbol: str
    price: Decimal
    change: Decimal | None = None
    change_percent: Decimal | None = None
    ok: Literal[True] = True


@dataclass(frozen=True)
class QuoteFailure:
    """A symbol whose price could not be fetched."""

    symbol: str
    reason: QuoteFailureReason
    detail: str | None = None
    ok: Literal[False] = False


QuoteResult = Quote | QuoteFailure
