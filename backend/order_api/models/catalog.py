"""
Catalog Models: Restaurant, MenuItem.

The catalog is maintained by the catalog service; the order API only reads it.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BigIntPK, Base, TimestampMixin


class Restaurant(TimestampMixin, Base):
    """
    A restaurant. Its region decides who may order from it.
    """

    __tablename__ = "restaurant"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    region: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    # Relationships
    menu_items: Mapped[list["MenuItem"]] = relationship(
        back_populates="restaurant", order_by="MenuItem.id"
    )

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name='{self.name}', region='{self.region}')>"


class MenuItem(TimestampMixin, Base):
    """
    A dish on a restaurant's menu.
    price_cents is the only source of truth for order line pricing.
    """

    __tablename__ = "menu_item"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True)
    restaurant_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("restaurant.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("price_cents >= 0", name="chk_menu_item_price_non_negative"),
    )

    # Relationships
    restaurant: Mapped["Restaurant"] = relationship(back_populates="menu_items")

    def __repr__(self) -> str:
        return f"<MenuItem(id={self.id}, name='{self.name}', price_cents={self.price_cents})>"
