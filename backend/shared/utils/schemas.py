"""
Shared Pydantic schemas used across the application.

Request bodies are deliberately loose on business rules (quantities,
payment details, status values). Those rules live in the domain services
so that every violation surfaces as a 400 with a domain message.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


# =============================================================================
# Common Types
# =============================================================================

OrderStatusValue = Literal["PENDING", "PAID", "CANCELLED"]
PaymentTypeValue = Literal["CASH", "UPI", "CARD", "NETBANKING"]


# =============================================================================
# Order Schemas
# =============================================================================


class OrderItemInput(BaseModel):
    """
    A requested order line.

    Any client-side price or restaurant id sent alongside is ignored;
    prices always come from the catalog.
    """

    menu_item_id: int
    # Range and type are checked by the pricing service
    quantity: Any = None


class PaymentInput(BaseModel):
    """Payment method as submitted by the client."""

    type: str
    details: dict[str, Any] = Field(default_factory=dict)


class CreateOrderRequest(BaseModel):
    """Request to place a new order."""

    items: list[OrderItemInput] = Field(default_factory=list)
    # Honoured for ADMIN only, must match the region of the items
    region: str | None = None
    payment: PaymentInput | None = None


class UpdateOrderStatusRequest(BaseModel):
    """Request to change an order's status (ADMIN / MANAGER)."""

    status: str


class PayOrderRequest(BaseModel):
    """Request to pay a pending order."""

    type: str
    details: dict[str, Any] = Field(default_factory=dict)


class OrderItemOutput(BaseModel):
    """Output for a single order line with its frozen price."""

    model_config = {"from_attributes": True}

    id: int
    menu_item_id: int
    menu_item_name: str | None = None
    quantity: int
    price_cents: int
    line_total_cents: int


class PaymentMethodOutput(BaseModel):
    """Stored payment method. Card numbers are already masked."""

    model_config = {"from_attributes": True}

    type: PaymentTypeValue
    details: dict[str, Any]
    updated_at: datetime | None = None


class OrderOutput(BaseModel):
    """Output for an order with its items and payment method."""

    model_config = {"from_attributes": True}

    id: int
    user_id: str
    region: str
    total_cents: int
    status: OrderStatusValue
    created_at: datetime
    items: list[OrderItemOutput]
    payment_method: PaymentMethodOutput | None = None


# =============================================================================
# Catalog Schemas
# =============================================================================


class MenuItemOutput(BaseModel):
    """Menu item as listed under a restaurant."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    price_cents: int


class RestaurantOutput(BaseModel):
    """Restaurant with its menu."""

    model_config = {"from_attributes": True}

    id: int
    name: str
    region: str
    menu_items: list[MenuItemOutput] = Field(default_factory=list)


class RestaurantListResponse(BaseModel):
    """Paginated restaurant listing."""

    items: list[RestaurantOutput]
    pagination: dict[str, Any]


# =============================================================================
# Common Response Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
