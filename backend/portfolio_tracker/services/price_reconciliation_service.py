"""Price reconciliation - write fresh market prices onto stored holdings.

Two triggers share this job: the scheduled refresh (all users) and the
on-demand refresh from the portfolio view (one user). Only stock and ETF
holdings are refreshed; mutual funds and debt keep their manually entered
price.
"""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio_tracker.constants import InstrumentType
from portfolio_tracker.services.market_data.price_fetcher import BatchPriceFetcher
from portfolio_tracker.services.repositories import HoldingRepository, RepositoryError

logger = logging.getLogger(__name__)

# Matches the holdings.current_price column scale
_PRICE_PRECISION = Decimal("0.0001")


class ReconciliationState(StrEnum):
    """Lifecycle of one job run."""

    IDLE = "idle"
    LOADING_HOLDINGS = "loading_holdings"
    FETCHING_PRICES = "fetching_prices"
    PERSISTING_UPDATES = "persisting_updates"
    FAILED = "failed"


@dataclass
class HoldingUpdateFailure:
    """A holding whose new price could not be saved."""

    holding_id: int
    symbol: str
    error: str


@dataclass
class ReconciliationResult:
    """Summary of one job run."""

    status: str  # "completed" or "failed"
    symbols_processed: int = 0
    holdings_updated: int = 0
    failures: list[HoldingUpdateFailure] = field(default_factory=list)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "completed"


def _chunks(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class PriceReconciliationJob:
    """Load live-priced holdings, fetch their prices, persist the ones that changed.

    Fetch failures only shrink the set of prices available. A failed write
    is rolled back and reported without stopping the remaining writes. Only
    failing to load the holdings ends the run as failed.
    """

    def __init__(
        self,
        db: Session,
        fetcher: BatchPriceFetcher,
        repository: HoldingRepository | None = None,
    ) -> None:
        self._db = db
        self._fetcher = fetcher
        self._repo = repository or HoldingRepository(db)
        self.state = ReconciliationState.IDLE

    def _transition(self, state: ReconciliationState) -> None:
        logger.debug(f"Price reconciliation: {self.state.value} -> {state.value}")
        self.state = state

    async def run(self, user_id: str | None = None) -> ReconciliationResult:
        """Run one reconciliation pass.

        Args:
            user_id: Restrict to one user's holdings; None refreshes everyone

        Returns:
            ReconciliationResult with counts and per-holding failures
        """
        self._transition(ReconciliationState.LOADING_HOLDINGS)
        try:
            holdings = self._repo.list_holdings(InstrumentType.LIVE_PRICED, user_id=user_id)
        except RepositoryError as e:
            self._transition(ReconciliationState.FAILED)
            logger.error(f"Price reconciliation aborted: {e}")
            return ReconciliationResult(status="failed", error=str(e))

        if not holdings:
            logger.info("No stock/ETF holdings to refresh")
            self._transition(ReconciliationState.IDLE)
            return ReconciliationResult(status="completed")

        # Read before any commit or rollback expires the instances
        snapshot = [(h, h.id, h.symbol, h.current_price) for h in holdings]
        symbols = list(dict.fromkeys(symbol for _, _, symbol, _ in snapshot))
        logger.info(f"Refreshing prices for {len(symbols)} symbols across {len(holdings)} holdings")

        self._transition(ReconciliationState.FETCHING_PRICES)
        prices: dict[str, Decimal] = {}
        for chunk in _chunks(symbols, self._fetcher.batch_limit):
            prices.update(await self._fetcher.fetch_prices(chunk))

        self._transition(ReconciliationState.PERSISTING_UPDATES)
        updated = 0
        failures: list[HoldingUpdateFailure] = []
        timestamp = datetime.now()

        for holding, holding_id, symbol, stored_price in snapshot:
            fetched = prices.get(symbol)
            if fetched is None:
                continue
            new_price = fetched.quantize(_PRICE_PRECISION)
            if new_price == stored_price:
                continue

            # A row deleted since loading fails its flush like any other write
            try:
                self._repo.update_current_price(holding, new_price, timestamp)
                self._db.commit()
                updated += 1
                logger.debug(f"Updated holding {holding_id} ({symbol}): {new_price}")
            except SQLAlchemyError as e:
                self._db.rollback()
                logger.error(f"Failed to save price for holding {holding_id} ({symbol}): {e}")
                failures.append(HoldingUpdateFailure(holding_id, symbol, str(e)))

        self._transition(ReconciliationState.IDLE)
        logger.info(
            f"Price reconciliation complete: {updated} holdings updated, "
            f"{len(failures)} failed, {len(symbols)} symbols processed"
        )
        return ReconciliationResult(
            status="completed",
            symbols_processed=len(symbols),
            holdings_updated=updated,
            failures=failures,
        )
