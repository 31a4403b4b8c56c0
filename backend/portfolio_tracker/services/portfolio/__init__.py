"""Portfolio valuation and rebalancing."""

from .rebalance_service import UserRebalanceReport, check_all_users, check_portfolio
from .valuation_service import (
    calculate_asset_type_allocation,
    calculate_sector_allocation,
    value_holding,
    value_portfolio,
)
from .valuation_types import (
    AssetTypeAllocationEntry,
    HoldingValuation,
    PortfolioValuation,
    SectorAllocationEntry,
)

__all__ = [
    "AssetTypeAllocationEntry",
    "HoldingValuation",
    "PortfolioValuation",
    "SectorAllocationEntry",
    "UserRebalanceReport",
    "calculate_asset_type_allocation",
    "calculate_sector_allocation",
    "check_all_users",
    "check_portfolio",
    "value_holding",
    "value_portfolio",
]
