"""
Repository layer.

Repositories wrap query construction and eager loading; they flush but
never commit. Services own the transaction.
"""

from .base import BaseRepository, RepositoryFilters
from .catalog import CatalogEntry, CatalogRepository, RestaurantRepository
from .order import OrderFilters, OrderRepository

__all__ = [
    "BaseRepository",
    "RepositoryFilters",
    "CatalogEntry",
    "CatalogRepository",
    "RestaurantRepository",
    "OrderFilters",
    "OrderRepository",
]
