"""
Centralized HTTP exceptions for consistent error handling.

Every exception carries an ErrorKind so callers can branch on the kind
without parsing messages, and an HTTP status code for the transport.

Usage:
    from shared.utils.exceptions import NotFoundError, ForbiddenError, ValidationError

    raise NotFoundError("Order", order_id)
    raise ForbiddenError("update orders from another region")
    raise ValidationError("At least one menu item is required")
"""

from enum import Enum
from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class ErrorKind(str, Enum):
    """Stable error categories exposed by the service."""

    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INTERNAL = "INTERNAL"


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, kind=self.kind.value, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found, or not addressable by the caller (404).

    Usage:
        raise NotFoundError("Order", 123)
        raise NotFoundError("Menu items", "4, 9")
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        if entity_id is not None:
            detail = f"{entity} with ID {entity_id} not found"
        else:
            detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


class OrderNotFoundError(NotFoundError):
    """Order not found."""

    def __init__(self, order_id: int | None = None, **log_context: Any):
        super().__init__("Order", order_id, **log_context)


class MenuItemsNotFoundError(NotFoundError):
    """One or more requested menu items do not exist."""

    def __init__(self, missing_ids: list[int], **log_context: Any):
        self.missing_ids = list(missing_ids)
        ids_str = ", ".join(str(i) for i in self.missing_ids)
        label = "Menu item" if len(self.missing_ids) == 1 else "Menu items"
        super().__init__(label, ids_str, **log_context)


# =============================================================================
# 403 Forbidden Errors
# =============================================================================


class ForbiddenError(AppException):
    """
    Authorization/permission error (403).

    Usage:
        raise ForbiddenError("cancel this order")
        raise ForbiddenError("pay for this order", user_id=user_id)
    """

    kind = ErrorKind.FORBIDDEN

    def __init__(self, action: str | None = None, **log_context: Any):
        if action:
            detail = f"Not authorized to {action}"
        else:
            detail = "Access denied"

        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            action=action,
            **log_context,
        )


class RegionAccessError(ForbiddenError):
    """Caller cannot act on resources of another region."""

    def __init__(self, region: str | None = None, **log_context: Any):
        super().__init__("access resources in another region", region=region, **log_context)


class InsufficientRoleError(ForbiddenError):
    """User doesn't have the required role."""

    def __init__(self, required_roles: list[str], **log_context: Any):
        roles_str = ", ".join(required_roles)
        super().__init__(
            f"perform this action (requires role: {roles_str})",
            required_roles=required_roles,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Quantity must be at least 1")
        raise ValidationError("Unknown payment type", field="type", value="CHEQUE")
    """

    kind = ErrorKind.BAD_REQUEST

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidStateError(ValidationError):
    """Entity is in an invalid state for the operation."""

    def __init__(self, entity: str, current_state: str, expected_states: list[str] | None = None, **log_context: Any):
        if expected_states:
            states_str = ", ".join(expected_states)
            detail = f"{entity} is in state '{current_state}', expected: {states_str}"
        else:
            detail = f"{entity} cannot be in state '{current_state}' for this operation"

        super().__init__(detail, entity=entity, current_state=current_state, **log_context)


class InvalidTransitionError(ValidationError):
    """Invalid status transition."""

    def __init__(self, entity: str, from_status: str, to_status: str, **log_context: Any):
        detail = f"Invalid transition from '{from_status}' to '{to_status}' for {entity}"
        super().__init__(detail, entity=entity, from_status=from_status, to_status=to_status, **log_context)


class PaymentDetailsError(ValidationError):
    """Payment details missing or malformed for the payment type."""

    def __init__(self, payment_type: str, reason: str, **log_context: Any):
        detail = f"Invalid {payment_type} payment details: {reason}"
        super().__init__(detail, payment_type=payment_type, **log_context)


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to build order response", order_id=123)
    """

    kind = ErrorKind.INTERNAL

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed; the transaction was rolled back."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error during {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
