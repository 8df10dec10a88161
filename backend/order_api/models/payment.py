"""
Payment Models: PaymentMethod.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, BigInteger, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BigIntPK, Base, TimestampMixin

if TYPE_CHECKING:
    from .order import Order


class PaymentMethod(TimestampMixin, Base):
    """
    How an order is (or will be) paid. At most one per order.

    details holds the normalized, already-masked fields for the type:
    CASH {}, UPI {"upiId"}, CARD {"cardNumber", "holder"?}, NETBANKING {"bankName"}.
    """

    __tablename__ = "payment_method"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("app_order.id"), nullable=False, unique=True
    )
    type: Mapped[str] = mapped_column(Text, nullable=False)  # CASH, UPI, CARD, NETBANKING
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Relationships
    order: Mapped["Order"] = relationship(back_populates="payment_method")

    def __repr__(self) -> str:
        return f"<PaymentMethod(id={self.id}, order_id={self.order_id}, type='{self.type}')>"
