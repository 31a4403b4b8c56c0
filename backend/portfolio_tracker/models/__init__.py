"""SQLAlchemy ORM models."""

from portfolio_tracker.models.holding import Holding

__all__ = [
    "Holding",
]
