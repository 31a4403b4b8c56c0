"""Portfolio valuation - single source of truth for value and P&L calculations.

Everything here is a pure function of the holdings passed in. Nothing reads
from or writes to the database, so the same numbers back the holdings list,
the portfolio summary, the rebalance check and the AI insight prompt.
"""

from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from portfolio_tracker.constants import SECTOR_COLORS, UNSPECIFIED_SECTOR
from portfolio_tracker.services.portfolio.valuation_types import (
    AssetTypeAllocationEntry,
    HoldingValuation,
    PortfolioValuation,
    SectorAllocationEntry,
)

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


class ValuedPosition(Protocol):
    """Anything shaped like a holding: the ORM model satisfies this."""

    id: int | None
    asset_type: str
    quantity: Decimal
    buy_price: Decimal
    current_price: Decimal
    sector: str | None


def _percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """part / whole * 100, or 0 when whole is not positive."""
    if whole > 0:
        return part / whole * _HUNDRED
    return _ZERO


def sector_name(sector: str | None) -> str:
    """Sector label used for grouping; blank or missing maps to "Others"."""
    if sector is None or not sector.strip():
        return UNSPECIFIED_SECTOR
    return sector.strip()


def value_holding(holding: ValuedPosition) -> HoldingValuation:
    """Calculate value, invested amount and P&L for a single holding.

    Args:
        holding: The holding to value

    Returns:
        HoldingValuation; pnl_percent is 0 when nothing was invested
    """
    quantity = Decimal(holding.quantity)
    value = quantity * Decimal(holding.current_price)
    invested = quantity * Decimal(holding.buy_price)
    pnl = value - invested

    return HoldingValuation(
        holding_id=holding.id,
        value=value,
        invested=invested,
        pnl=pnl,
        pnl_percent=_percent_of(pnl, invested),
    )


def calculate_sector_allocation(
    holdings: Iterable[ValuedPosition],
) -> list[SectorAllocationEntry]:
    """Group holding values by sector as whole-number percentages of total value.

    Each sector is rounded independently (half-up), so the percentages can add
    up to 99 or 101. Sectors keep the order in which they first appear, and
    that order picks the chart color. A portfolio worth nothing has no
    allocation.
    """
    sector_values: dict[str, Decimal] = {}
    for holding in holdings:
        name = sector_name(holding.sector)
        sector_values[name] = sector_values.get(name, _ZERO) + value_holding(holding).value

    total_value = sum(sector_values.values(), _ZERO)
    if total_value <= 0:
        return []

    return [
        SectorAllocationEntry(
            name=name,
            percentage=int(
                _percent_of(value, total_value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            ),
            color_index=index % len(SECTOR_COLORS),
            value=value,
        )
        for index, (name, value) in enumerate(sector_values.items())
    ]


def calculate_asset_type_allocation(
    holdings: Iterable[ValuedPosition],
) -> list[AssetTypeAllocationEntry]:
    """Value per instrument category, with its share of the total to one decimal."""
    type_values: dict[str, Decimal] = {}
    for holding in holdings:
        type_values[holding.asset_type] = (
            type_values.get(holding.asset_type, _ZERO) + value_holding(holding).value
        )

    total_value = sum(type_values.values(), _ZERO)
    return [
        AssetTypeAllocationEntry(
            asset_type=asset_type,
            value=value,
            percentage=_percent_of(value, total_value).quantize(
                Decimal("0.1"), rounding=ROUND_HALF_UP
            ),
        )
        for asset_type, value in type_values.items()
    ]


def value_portfolio(holdings: Sequence[ValuedPosition]) -> PortfolioValuation:
    """Aggregate a collection of holdings into totals and allocation breakdowns.

    Args:
        holdings: Holdings belonging to one portfolio

    Returns:
        PortfolioValuation with per-holding values, totals, sector and
        asset-type allocation
    """
    valuations = [value_holding(h) for h in holdings]
    total_value = sum((v.value for v in valuations), _ZERO)
    total_invested = sum((v.invested for v in valuations), _ZERO)
    total_pnl = total_value - total_invested

    return PortfolioValuation(
        total_value=total_value,
        total_invested=total_invested,
        total_pnl=total_pnl,
        total_pnl_percent=_percent_of(total_pnl, total_invested),
        holdings=valuations,
        sector_allocation=calculate_sector_allocation(holdings),
        asset_type_allocation=calculate_asset_type_allocation(holdings),
    )
