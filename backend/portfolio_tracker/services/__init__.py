"""Services layer - business logic and external integrations.

Subpackages:
- ai/: Language-model gateway client and portfolio insights
- market_data/: Quote source, quote cache, batch price fetching
- portfolio/: Valuation and rebalancing
- repositories/: Data access layer
- shared/: Shared utilities
"""

from portfolio_tracker.services.repositories import (
    HoldingRepository,
    NotFoundError,
    RepositoryError,
)

__all__ = [
    "HoldingRepository",
    "NotFoundError",
    "RepositoryError",
]
