"""
Centralized constants for the backend application.
Avoid magic strings and repeated constants.

Usage:
    from shared.config.constants import Roles, OrderStatus, PaymentType

    if identity.role == Roles.ADMIN:
        ...

    if order.status == OrderStatus.PENDING:
        ...
"""

from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants, highest privilege first."""

    ADMIN: Final[str] = "ADMIN"
    MANAGER: Final[str] = "MANAGER"
    MEMBER: Final[str] = "MEMBER"

    ALL: Final[list[str]] = [ADMIN, MANAGER, MEMBER]


MANAGEMENT_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN, Roles.MANAGER})


# =============================================================================
# Regions
# =============================================================================


class Regions:
    """Geographic partitions for restaurants, staff and orders."""

    INDIA: Final[str] = "INDIA"
    AMERICA: Final[str] = "AMERICA"

    ALL: Final[list[str]] = [INDIA, AMERICA]


# =============================================================================
# Entity Status Constants
# =============================================================================


class OrderStatus:
    """Order status constants."""

    PENDING: Final[str] = "PENDING"
    PAID: Final[str] = "PAID"
    CANCELLED: Final[str] = "CANCELLED"

    ALL: Final[list[str]] = [PENDING, PAID, CANCELLED]


class PaymentType:
    """Payment method constants."""

    CASH: Final[str] = "CASH"
    UPI: Final[str] = "UPI"
    CARD: Final[str] = "CARD"
    NETBANKING: Final[str] = "NETBANKING"

    ALL: Final[list[str]] = [CASH, UPI, CARD, NETBANKING]


# =============================================================================
# Status Transitions
# =============================================================================

# Valid order status transitions (from -> [allowed to states])
ORDER_TRANSITIONS: Final[dict[str, list[str]]] = {
    OrderStatus.PENDING: [OrderStatus.PAID, OrderStatus.CANCELLED],
    OrderStatus.PAID: [],  # Terminal state
    OrderStatus.CANCELLED: [],  # Terminal state
}


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Quantity limits
    MIN_QUANTITY: Final[int] = 1
    MAX_QUANTITY: Final[int] = 99

    # Line items per order
    MAX_ORDER_LINES: Final[int] = 100

    # Card numbers keep this many trailing digits visible after masking
    CARD_VISIBLE_DIGITS: Final[int] = 4

    # Free-text payment detail fields
    MAX_DETAIL_LENGTH: Final[int] = 100

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 200
    DEFAULT_OFFSET: Final[int] = 0


def validate_order_status(status: str) -> bool:
    """Validate that an order status is valid."""
    return status in OrderStatus.ALL


def validate_order_transition(current_status: str, new_status: str) -> bool:
    """
    Validate that an order status transition is allowed.

    Keeping the current status is always allowed.
    """
    if current_status == new_status:
        return True
    return new_status in ORDER_TRANSITIONS.get(current_status, [])
