"""
Payment detail validation and card masking.

Each payment type accepts a fixed set of keys; anything else is dropped.
Card numbers are masked here, before they can reach the database or a log.
"""

import re
from typing import Any

from shared.config.constants import Limits, PaymentType
from shared.config.settings import settings
from shared.utils.exceptions import PaymentDetailsError, ValidationError

_CARD_SEPARATORS = re.compile(r"[\s-]")


def mask_card_number(card_number: str, mask_char: str | None = None) -> str:
    """
    Mask all but the last digits of a card number.

    "1234 5678-9012 3456" -> "************3456"

    Raises:
        PaymentDetailsError: if the number has non-digits or too few digits
    """
    mask_char = mask_char or settings.card_mask_char
    digits = _CARD_SEPARATORS.sub("", card_number)
    if not digits.isdigit() or not digits.isascii():
        raise PaymentDetailsError(PaymentType.CARD, "cardNumber must contain only digits")
    if len(digits) < Limits.CARD_VISIBLE_DIGITS:
        raise PaymentDetailsError(
            PaymentType.CARD,
            f"cardNumber must have at least {Limits.CARD_VISIBLE_DIGITS} digits",
        )

    visible = Limits.CARD_VISIBLE_DIGITS
    return mask_char * (len(digits) - visible) + digits[-visible:]


def _required_text(payment_type: str, details: dict[str, Any], key: str) -> str:
    value = details.get(key)
    if not isinstance(value, str) or not value.strip():
        raise PaymentDetailsError(payment_type, f"{key} is required")
    value = value.strip()
    if len(value) > Limits.MAX_DETAIL_LENGTH:
        raise PaymentDetailsError(
            payment_type, f"{key} must be at most {Limits.MAX_DETAIL_LENGTH} characters"
        )
    return value


def normalize_payment_type(payment_type: Any) -> str:
    """Return the canonical payment type or raise ValidationError."""
    normalized = str(payment_type or "").strip().upper()
    if normalized not in PaymentType.ALL:
        raise ValidationError(
            f"Unknown payment type '{payment_type}'. Expected one of: {', '.join(PaymentType.ALL)}",
            field="type",
        )
    return normalized


def normalize_payment_details(
    payment_type: Any,
    details: dict[str, Any] | None,
) -> tuple[str, dict[str, Any]]:
    """
    Validate payment details for a type and return (type, stored_details).

    - CASH: {}
    - UPI: {"upiId"}
    - CARD: {"cardNumber" (masked), "holder"?}
    - NETBANKING: {"bankName"}
    """
    payment_type = normalize_payment_type(payment_type)
    details = details or {}

    if payment_type == PaymentType.CASH:
        return payment_type, {}

    if payment_type == PaymentType.UPI:
        return payment_type, {"upiId": _required_text(payment_type, details, "upiId")}

    if payment_type == PaymentType.NETBANKING:
        return payment_type, {"bankName": _required_text(payment_type, details, "bankName")}

    # CARD
    raw_number = details.get("cardNumber")
    if not isinstance(raw_number, str) or not raw_number.strip():
        raise PaymentDetailsError(payment_type, "cardNumber is required")
    stored: dict[str, Any] = {"cardNumber": mask_card_number(raw_number)}

    holder = details.get("holder")
    if isinstance(holder, str) and holder.strip():
        stored["holder"] = holder.strip()[: Limits.MAX_DETAIL_LENGTH]

    return payment_type, stored
