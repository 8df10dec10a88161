"""
Catalog Domain Service.

Region-scoped, read-only browsing of restaurants and their menus.
"""

from typing import Sequence

from sqlalchemy.orm import Session

from shared.config.constants import Limits
from shared.security.identity import Identity
from shared.utils.exceptions import NotFoundError
from order_api.models import Restaurant
from order_api.repositories import CatalogRepository, RepositoryFilters
from order_api.services.permissions import Action, PermissionContext


class CatalogService:
    """
    Domain service for restaurant browsing.

    ADMIN sees every restaurant; MANAGER and MEMBER only those of their region.
    """

    def __init__(self, db: Session):
        self._repo = CatalogRepository(db)

    def list_restaurants(
        self,
        identity: Identity,
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = Limits.DEFAULT_OFFSET,
    ) -> tuple[Sequence[Restaurant], int]:
        """Return (restaurants, total) for the caller's scope."""
        filters = RepositoryFilters(
            limit=limit,
            offset=offset,
            clause=PermissionContext(identity).visibility_clause(Restaurant),
        )
        return self._repo.find_restaurants(filters), self._repo.count_restaurants(filters)

    def get_restaurant(self, identity: Identity, restaurant_id: int) -> Restaurant:
        restaurant = self._repo.find_restaurant_by_id(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant", restaurant_id)

        PermissionContext(identity).require(Action.READ, restaurant, entity="Restaurant")
        return restaurant
