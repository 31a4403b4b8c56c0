"""Holding data access layer.

The price refresh job, the holdings API and the rebalance check all read and
write holdings through this class.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from portfolio_tracker.models import Holding
from portfolio_tracker.services.repositories.exceptions import NotFoundError, RepositoryError

logger = logging.getLogger(__name__)


class HoldingRepository:
    """Centralized holding data access.

    Naming conventions:
    - find_* : Query that may return None
    - get_* : Query that raises NotFoundError if missing
    - list_* : Query returning a sequence
    - create_* : Insert new record
    - update_* : Modify existing record
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def find_for_user(self, holding_id: int, user_id: str) -> Holding | None:
        """Find a holding by primary key, only if it belongs to the user."""
        return (
            self._db.query(Holding)
            .filter(Holding.id == holding_id, Holding.user_id == user_id)
            .first()
        )

    def get_for_user(self, holding_id: int, user_id: str) -> Holding:
        """Get a user's holding or raise NotFoundError."""
        holding = self.find_for_user(holding_id, user_id)
        if holding is None:
            raise NotFoundError("Holding", holding_id)
        return holding

    def list_for_user(self, user_id: str) -> Sequence[Holding]:
        """All holdings of one user, newest first."""
        return (
            self._db.query(Holding)
            .filter(Holding.user_id == user_id)
            .order_by(Holding.created_at.desc(), Holding.id.desc())
            .all()
        )

    def list_all(self) -> Sequence[Holding]:
        """Every holding of every user."""
        return self._db.query(Holding).order_by(Holding.user_id, Holding.id).all()

    def list_holdings(
        self,
        asset_types: Iterable[str],
        user_id: str | None = None,
    ) -> Sequence[Holding]:
        """Holdings in the given instrument categories, optionally for one user.

        Raises:
            RepositoryError: If the holdings cannot be read at all
        """
        query = self._db.query(Holding).filter(Holding.asset_type.in_(list(asset_types)))
        if user_id is not None:
            query = query.filter(Holding.user_id == user_id)

        try:
            return query.order_by(Holding.id).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to load holdings: {e}")
            raise RepositoryError(f"Failed to load holdings: {e}") from e

    def create(self, user_id: str, **fields: Any) -> Holding:
        """Insert a new holding for the user."""
        holding = Holding(user_id=user_id, **fields)
        self._db.add(holding)
        self._db.flush()
        logger.debug(f"Created holding {holding.symbol} for user {user_id}")
        return holding

    def update_fields(self, holding: Holding, **fields: Any) -> Holding:
        """Apply a partial update to a holding."""
        for name, value in fields.items():
            setattr(holding, name, value)
        holding.updated_at = datetime.now()
        self._db.flush()
        return holding

    def update_current_price(
        self,
        holding: Holding,
        price: Decimal,
        timestamp: datetime | None = None,
    ) -> Holding:
        """Store a new market price on the holding."""
        holding.current_price = price
        holding.updated_at = timestamp or datetime.now()
        self._db.flush()
        return holding

    def delete(self, holding: Holding) -> None:
        """Delete a holding."""
        self._db.delete(holding)
        self._db.flush()
