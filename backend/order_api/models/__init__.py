"""
SQLAlchemy ORM Models Package.

- base: Base class and TimestampMixin
- catalog: Restaurant, MenuItem (read-only for the order API)
- order: Order, OrderItem
- payment: PaymentMethod
"""

from .base import Base, TimestampMixin
from .catalog import Restaurant, MenuItem
from .order import Order, OrderItem
from .payment import PaymentMethod

__all__ = [
    "Base",
    "TimestampMixin",
    "Restaurant",
    "MenuItem",
    "Order",
    "OrderItem",
    "PaymentMethod",
]
