"""
Identity of the authenticated caller.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """
    The caller as asserted by a verified token.

    Immutable for the lifetime of a request. `id` is opaque to the
    order core; it is compared against Order.user_id for ownership.
    """

    id: str
    role: str
    region: str
