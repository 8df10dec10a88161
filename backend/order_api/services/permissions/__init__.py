"""
Permission Strategy Pattern implementation.
One strategy per role instead of role if/elif chains in every service.

Usage:
    from order_api.services.permissions import PermissionContext, Action

    ctx = PermissionContext(identity)
    ctx.require(Action.PAY, order)
"""

from .strategies import (
    PermissionStrategy,
    AdminStrategy,
    ManagerStrategy,
    MemberStrategy,
    NoAccessStrategy,
    get_strategy_for_role,
)
from .context import Action, Decision, PermissionContext, authorize

__all__ = [
    # Strategies
    "PermissionStrategy",
    "AdminStrategy",
    "ManagerStrategy",
    "MemberStrategy",
    "NoAccessStrategy",
    "get_strategy_for_role",
    # Context
    "Action",
    "Decision",
    "PermissionContext",
    "authorize",
]
