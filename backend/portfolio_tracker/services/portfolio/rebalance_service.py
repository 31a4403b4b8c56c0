"""Rule-based rebalancing checks for a user's portfolio."""

import logging
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol

from portfolio_tracker.services.portfolio.valuation_service import (
    ValuedPosition,
    sector_name,
    value_holding,
)

logger = logging.getLogger(__name__)

SECTOR_CONCENTRATION_LIMIT = Decimal("40")
HOLDING_CONCENTRATION_LIMIT = Decimal("25")
DRAWDOWN_REVIEW_LIMIT = Decimal("-20")
MIN_SECTORS = 3


@dataclass
class UserRebalanceReport:
    """Recommendations for one user."""

    user_id: str
    recommendations: list[str]


class OwnedPosition(ValuedPosition, Protocol):
    """A valued position that also knows its owner and ticker."""

    user_id: str
    symbol: str


def _pct(value: Decimal) -> str:
    return f"{value:.1f}"


def check_portfolio(holdings: Sequence[OwnedPosition]) -> list[str]:
    """Return rebalancing recommendations for one portfolio.

    Checks, in order: sectors above 40% of value, single holdings above 25%,
    holdings more than 20% below their buy price, and portfolios of three or
    more holdings spread over fewer than three sectors.
    """
    valuations = [(h, value_holding(h)) for h in holdings]
    total_value = sum((v.value for _, v in valuations), Decimal("0"))
    if total_value <= 0:
        return []

    recommendations: list[str] = []

    sector_values: dict[str, Decimal] = defaultdict(Decimal)
    for holding, valuation in valuations:
        sector_values[sector_name(holding.sector)] += valuation.value

    for sector, value in sector_values.items():
        share = value / total_value * 100
        if share > SECTOR_CONCENTRATION_LIMIT:
            recommendations.append(
                f"High concentration in {sector} ({_pct(share)}%). Consider diversifying."
            )

    for holding, valuation in valuations:
        share = valuation.value / total_value * 100
        if share > HOLDING_CONCENTRATION_LIMIT:
            recommendations.append(
                f"{holding.symbol} represents {_pct(share)}% of portfolio. Consider trimming."
            )

    for holding, valuation in valuations:
        if valuation.invested > 0 and valuation.pnl_percent < DRAWDOWN_REVIEW_LIMIT:
            recommendations.append(
                f"{holding.symbol} is down {_pct(abs(valuation.pnl_percent))}%. "
                "Review for potential exit."
            )

    if len(sector_values) < MIN_SECTORS and len(holdings) >= MIN_SECTORS:
        recommendations.append(
            f"Portfolio spans only {len(sector_values)} sector(s). Consider adding more sectors."
        )

    return recommendations


def check_all_users(holdings: Sequence[OwnedPosition]) -> list[UserRebalanceReport]:
    """Group holdings by owner and keep the users who have recommendations."""
    by_user: dict[str, list[OwnedPosition]] = defaultdict(list)
    for holding in holdings:
        by_user[holding.user_id].append(holding)

    reports = []
    for user_id, user_holdings in by_user.items():
        recommendations = check_portfolio(user_holdings)
        if recommendations:
            logger.info(f"User {user_id[:8]}... has {len(recommendations)} rebalance recommendations")
            reports.append(UserRebalanceReport(user_id=user_id, recommendations=recommendations))
    return reports
