"""Repository layer - data access abstraction.

Repositories handle all database queries, providing a clean interface
for services. Services should use repositories for data access rather
than directly querying SQLAlchemy models.

Dependency direction: Services -> Repositories -> Models
"""

from .exceptions import NotFoundError, RepositoryError
from .holding_repository import HoldingRepository

__all__ = [
    "HoldingRepository",
    "NotFoundError",
    "RepositoryError",
]
