"""
Order Repository - Data access for orders, their items and payment method.
Eager loading of items and payment method prevents N+1 queries in listings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from sqlalchemy.orm import selectinload
from sqlalchemy import Select, select

from order_api.models import Order, OrderItem, PaymentMethod
from shared.config.constants import OrderStatus
from .base import BaseRepository, RepositoryFilters

if TYPE_CHECKING:
    from order_api.services.domain.pricing_service import PricedOrder


@dataclass
class OrderFilters(RepositoryFilters):
    """Filters specific to orders."""

    user_id: str | None = None
    status: str | None = None


class OrderRepository(BaseRepository[Order]):
    """
    Repository for Order entities.

    Guarantees eager loading of:
    - items -> menu_item
    - payment_method
    """

    @property
    def model(self) -> type[Order]:
        return Order

    def _base_query(self) -> Select:
        return (
            select(Order)
            .options(
                selectinload(Order.items)
                .selectinload(OrderItem.menu_item)
            )
            .options(selectinload(Order.payment_method))
            .order_by(Order.created_at.desc(), Order.id.desc())
        )

    def _apply_filters(self, query: Select, filters: RepositoryFilters) -> Select:
        """Apply order-specific filters."""
        if not isinstance(filters, OrderFilters):
            filters = OrderFilters(**filters.__dict__)

        if filters.region:
            query = query.where(Order.region == filters.region)

        if filters.user_id:
            query = query.where(Order.user_id == filters.user_id)

        if filters.status:
            query = query.where(Order.status == filters.status)

        return query

    def find_by_filter(self, filters: OrderFilters) -> Sequence[Order]:
        """Find orders by region / owner / status with pagination."""
        return self.find_all(filters)

    def create_order_with_items(
        self,
        user_id: str,
        priced: PricedOrder,
        payment: tuple[str, dict[str, Any]] | None = None,
    ) -> Order:
        """
        Insert the order row, one item per priced line and the optional
        payment method. Nothing is committed here.
        """
        order = Order(
            user_id=user_id,
            region=priced.region,
            total_cents=priced.total_cents,
            status=OrderStatus.PENDING,
        )
        self._db.add(order)
        self._db.flush()

        for line in priced.lines:
            self._db.add(
                OrderItem(
                    order_id=order.id,
                    menu_item_id=line.menu_item_id,
                    quantity=line.quantity,
                    price_cents=line.price_cents,
                )
            )

        if payment is not None:
            payment_type, details = payment
            self._db.add(
                PaymentMethod(order_id=order.id, type=payment_type, details=details)
            )

        self._db.flush()
        return order

    def create_or_complete_payment(
        self,
        order_id: int,
        payment_type: str,
        details: dict[str, Any],
    ) -> PaymentMethod:
        """Upsert the payment method of an order (one per order)."""
        payment = self._db.scalar(
            select(PaymentMethod).where(PaymentMethod.order_id == order_id)
        )
        if payment is None:
            payment = PaymentMethod(order_id=order_id, type=payment_type, details=details)
            self._db.add(payment)
        else:
            payment.type = payment_type
            payment.details = details

        self._db.flush()
        return payment

    def update_status(self, order: Order, status: str) -> Order:
        order.status = status
        self._db.flush()
        return order
