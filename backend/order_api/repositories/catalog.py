"""
Catalog Repository - read-only access to restaurants and menu items.
"""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.orm import Session, selectinload
from sqlalchemy import Select, select

from order_api.models import MenuItem, Restaurant
from .base import BaseRepository, RepositoryFilters


@dataclass(frozen=True)
class CatalogEntry:
    """A menu item joined with the region of its restaurant."""

    id: int
    name: str
    price_cents: int
    restaurant_id: int
    region: str


class RestaurantRepository(BaseRepository[Restaurant]):
    """
    Repository for Restaurant entities.

    Guarantees eager loading of menu_items.
    """

    @property
    def model(self) -> type[Restaurant]:
        return Restaurant

    def _base_query(self) -> Select:
        return (
            select(Restaurant)
            .options(selectinload(Restaurant.menu_items))
            .order_by(Restaurant.id)
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        if filters.region:
            query = query.where(Restaurant.region == filters.region)
        return query


class CatalogRepository:
    """
    Read-only lookups the pricing engine depends on.
    """

    def __init__(self, db: Session):
        self._db = db
        self.restaurants = RestaurantRepository(db)

    def find_menu_items_by_ids(self, ids: list[int]) -> list[CatalogEntry]:
        """
        Resolve menu items with their restaurant region in one query.
        Unknown ids are simply absent from the result.
        """
        if not ids:
            return []

        rows = self._db.execute(
            select(
                MenuItem.id,
                MenuItem.name,
                MenuItem.price_cents,
                MenuItem.restaurant_id,
                Restaurant.region,
            )
            .join(Restaurant, MenuItem.restaurant_id == Restaurant.id)
            .where(MenuItem.id.in_(set(ids)))
        ).all()

        return [
            CatalogEntry(
                id=row.id,
                name=row.name,
                price_cents=row.price_cents,
                restaurant_id=row.restaurant_id,
                region=row.region,
            )
            for row in rows
        ]

    def find_restaurants(self, filters: RepositoryFilters | None = None) -> Sequence[Restaurant]:
        return self.restaurants.find_all(filters)

    def count_restaurants(self, filters: RepositoryFilters | None = None) -> int:
        return self.restaurants.count(filters)

    def find_restaurant_by_id(self, restaurant_id: int) -> Restaurant | None:
        return self.restaurants.find_by_id(restaurant_id)
