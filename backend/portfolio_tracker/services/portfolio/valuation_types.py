"""Value objects for portfolio valuation."""

from dataclasses import dataclass, field
from decimal import Decimal

from portfolio_tracker.constants import SECTOR_COLORS


@dataclass
class HoldingValuation:
    """Calculated values for a single holding."""

    holding_id: int | None
    value: Decimal
    invested: Decimal
    pnl: Decimal
    pnl_percent: Decimal


@dataclass
class SectorAllocationEntry:
    """Share of total portfolio value held in one sector."""

    name: str
    percentage: int
    color_index: int
    value: Decimal

    @property
    def color(self) -> str:
        return SECTOR_COLORS[self.color_index]


@dataclass
class AssetTypeAllocationEntry:
    """Share of total portfolio value held in one instrument category."""

    asset_type: str
    value: Decimal
    percentage: Decimal


@dataclass
class PortfolioValuation:
    """Aggregated valuation for a collection of holdings."""

    total_value: Decimal
    total_invested: Decimal
    total_pnl: Decimal
    total_pnl_percent: Decimal
    holdings: list[HoldingValuation] = field(default_factory=list)
    sector_allocation: list[SectorAllocationEntry] = field(default_factory=list)
    asset_type_allocation: list[AssetTypeAllocationEntry] = field(default_factory=list)
