"""
Base Repository implementation.
Provides common data access patterns. Repositories only flush; the
caller owns the transaction.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TypeVar, Generic, Sequence

from sqlalchemy.orm import Session
from sqlalchemy import ColumnElement, Select, select, func

from shared.config.constants import Limits


ModelT = TypeVar("ModelT")


@dataclass
class RepositoryFilters:
    """Base filters for repository queries."""

    # Pagination
    limit: int = Limits.DEFAULT_PAGE_SIZE
    offset: int = Limits.DEFAULT_OFFSET

    # Region filtering
    region: str | None = None

    # Extra WHERE clause, e.g. a role visibility filter
    clause: ColumnElement[bool] | None = None

    def __post_init__(self):
        """Validate and normalize filters."""
        self.limit = min(max(1, self.limit), Limits.MAX_PAGE_SIZE)
        self.offset = max(0, self.offset)


class BaseRepository(ABC, Generic[ModelT]):
    """
    Abstract base repository with common operations.

    Subclasses must implement:
    - model: The SQLAlchemy model class
    - _base_query(): Base query with eager loading
    - _apply_filters(): Entity-specific filters
    """

    def __init__(self, db: Session):
        self._db = db

    @property
    @abstractmethod
    def model(self) -> type[ModelT]:
        """Return the SQLAlchemy model class."""
        ...

    @abstractmethod
    def _base_query(self) -> Select:
        """
        Return base query with proper eager loading.
        Subclasses must implement this with selectinload/joinedload.
        """
        ...

    @abstractmethod
    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply entity-specific filters to query."""
        ...

    def find_all(self, filters: RepositoryFilters | None = None) -> Sequence[ModelT]:
        """
        Find all entities matching filters, paginated.
        """
        filters = filters or RepositoryFilters()
        query = self._apply_filters(self._base_query(), filters)
        if filters.clause is not None:
            query = query.where(filters.clause)

        query = query.offset(filters.offset).limit(filters.limit)

        return self._db.execute(query).scalars().unique().all()

    def find_by_id(self, entity_id: int, for_update: bool = False) -> ModelT | None:
        """
        Find entity by ID.

        Args:
            entity_id: Entity ID
            for_update: Lock the row until the surrounding transaction ends

        Returns:
            Entity or None
        """
        query = self._base_query().where(self.model.id == entity_id)
        if for_update:
            # Lock only the root table; eager loads run as separate SELECTs.
            # populate_existing overwrites an identity-map copy with the locked row.
            query = query.with_for_update(of=self.model).execution_options(
                populate_existing=True
            )

        return self._db.scalar(query)

    def count(self, filters: RepositoryFilters | None = None) -> int:
        """Count entities matching filters, ignoring pagination."""
        filters = filters or RepositoryFilters()

        query = self._apply_filters(select(func.count()).select_from(self.model), filters)
        if filters.clause is not None:
            query = query.where(filters.clause)

        return self._db.scalar(query) or 0

