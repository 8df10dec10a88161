"""
Order Models: Order, OrderItem.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import OrderStatus
from .base import BigIntPK, Base, TimestampMixin

if TYPE_CHECKING:
    from .catalog import MenuItem
    from .payment import PaymentMethod


class Order(TimestampMixin, Base):
    """
    An order placed by a user.

    region and total_cents are fixed at creation. status only changes
    through OrderService; there is no delete path.
    """

    __tablename__ = "app_order"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    # Opaque id of the identity that placed the order
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    region: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        Text, default=OrderStatus.PENDING, nullable=False, index=True
    )  # PENDING, PAID, CANCELLED

    # Relationships
    items: Mapped[list["OrderItem"]] = relationship(
        back_populates="order", order_by="OrderItem.id"
    )
    payment_method: Mapped[Optional["PaymentMethod"]] = relationship(
        back_populates="order", uselist=False
    )

    __table_args__ = (
        CheckConstraint("total_cents >= 0", name="chk_order_total_non_negative"),
        # Manager listings
        Index("ix_order_region_status", "region", "status"),
        # Member listings
        Index("ix_order_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, user_id='{self.user_id}', region='{self.region}', status='{self.status}', total={self.total_cents})>"


class OrderItem(TimestampMixin, Base):
    """
    A single line of an order.
    Stores the menu price at the time of order; later catalog changes do not touch it.
    """

    __tablename__ = "order_item"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_order.id"), nullable=False, index=True
    )
    menu_item_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("menu_item.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_item_quantity_positive"),
        CheckConstraint("price_cents >= 0", name="chk_order_item_price_non_negative"),
    )

    # Relationships
    order: Mapped["Order"] = relationship(back_populates="items")
    menu_item: Mapped["MenuItem"] = relationship()

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.quantity

    @property
    def menu_item_name(self) -> str | None:
        return self.menu_item.name if self.menu_item else None
