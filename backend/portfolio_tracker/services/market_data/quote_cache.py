"""Process-local cache of recently fetched prices."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedQuote:
    """A price and the moment it was fetched (monotonic clock seconds)."""

    symbol: str
    price: Decimal
    fetched_at: float


class QuoteCache:
    """Symbol -> price map whose entries expire after a fixed TTL.

    Stale entries are never deleted, only ignored by ``get`` until the next
    ``put`` overwrites them; the map grows with the number of distinct symbols
    seen by the process. One instance is built at start-up and shared by every
    fetcher. All access happens on the event loop thread, so there is no lock.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CachedQuote] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, symbol: str) -> Decimal | None:
        """Cached price if it is younger than the TTL, otherwise None."""
        entry = self._entries.get(symbol)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at >= self._ttl_seconds:
            return None
        return entry.price

    def put(self, symbol: str, price: Decimal) -> None:
        """Store a freshly fetched price, replacing any previous entry."""
        self._entries[symbol] = CachedQuote(symbol=symbol, price=price, fetched_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
