"""
Order state machine.

PENDING -> PAID, PENDING -> CANCELLED. PAID and CANCELLED are terminal.
"""

from shared.config.constants import OrderStatus, validate_order_status, validate_order_transition
from shared.config.settings import settings
from shared.utils.exceptions import InvalidStateError, InvalidTransitionError, ValidationError


def require_cancellable(current_status: str) -> None:
    if current_status == OrderStatus.PAID:
        raise InvalidStateError("Order", current_status, [OrderStatus.PENDING])
    if current_status == OrderStatus.CANCELLED:
        raise ValidationError("Order is already cancelled", current_state=current_status)


def require_payable(current_status: str) -> None:
    if current_status == OrderStatus.PAID:
        raise ValidationError("Order is already paid", current_state=current_status)
    if current_status != OrderStatus.PENDING:
        raise InvalidStateError("Order", current_status, [OrderStatus.PENDING])


def require_status_change(current_status: str, new_status: str, strict: bool | None = None) -> None:
    """
    Validate a direct status update.

    Unknown statuses are always rejected. With strict transitions (the
    default, see settings.strict_status_transitions) terminal states cannot
    be left; otherwise any known status may be set.
    """
    if not validate_order_status(new_status):
        raise ValidationError(
            f"Unknown order status '{new_status}'. Expected one of: {', '.join(OrderStatus.ALL)}",
            field="status",
        )

    if strict is None:
        strict = settings.strict_status_transitions
    if strict and not validate_order_transition(current_status, new_status):
        raise InvalidTransitionError("Order", current_status, new_status)
