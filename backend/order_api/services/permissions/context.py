"""
Permission Context - Main entry point for permission checks.

authorize() is the pure decision function; PermissionContext wraps it
for services and raises the matching exception on denial.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

from sqlalchemy import ColumnElement

from shared.config.constants import MANAGEMENT_ROLES
from shared.security.identity import Identity
from shared.utils.exceptions import (
    ErrorKind,
    ForbiddenError,
    InsufficientRoleError,
    NotFoundError,
    RegionAccessError,
)
from .strategies import get_strategy_for_role


class Action(Enum):
    """Available actions for permission checks."""
    CREATE = auto()
    READ = auto()
    LIST = auto()  # READ applied to each row of a listing
    UPDATE_STATUS = auto()
    CANCEL = auto()
    PAY = auto()


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check. kind is set only when denied."""

    allowed: bool
    kind: ErrorKind | None = None
    reason: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def forbid(cls, reason: str) -> "Decision":
        return cls(allowed=False, kind=ErrorKind.FORBIDDEN, reason=reason)

    @classmethod
    def hide(cls, reason: str) -> "Decision":
        return cls(allowed=False, kind=ErrorKind.NOT_FOUND, reason=reason)


def authorize(identity: Identity, action: Action, resource: Any) -> Decision:
    """
    Decide whether `identity` may perform `action` on `resource`.

    For CREATE the resource only needs a `region` (e.g. a PricedOrder);
    for every other action it is an order or restaurant.
    Reads of invisible resources are reported as NOT_FOUND so that
    callers cannot probe for ids outside their scope.
    """
    strategy = get_strategy_for_role(identity.role)

    if action == Action.CREATE:
        if strategy.can_create(identity, resource.region):
            return Decision.allow()
        return Decision.forbid("order from restaurants in another region")

    if action in (Action.READ, Action.LIST):
        if strategy.is_visible(identity, resource):
            return Decision.allow()
        return Decision.hide("resource outside the caller's scope")

    if action == Action.UPDATE_STATUS:
        if strategy.can_update_status(identity, resource):
            return Decision.allow()
        return Decision.forbid("update the status of this order")

    if action == Action.CANCEL:
        if strategy.can_cancel(identity, resource):
            return Decision.allow()
        return Decision.forbid("cancel this order")

    if action == Action.PAY:
        if strategy.can_pay(identity, resource):
            return Decision.allow()
        return Decision.forbid("pay for this order")

    return Decision.forbid("perform this action")


class PermissionContext:
    """
    Context for performing permission checks.

    Usage:
        ctx = PermissionContext(identity)

        # Raise on denial
        ctx.require(Action.CANCEL, order)

        # Narrow a listing
        clause = ctx.visibility_clause(Order)
    """

    def __init__(self, identity: Identity):
        self._identity = identity
        self._strategy = get_strategy_for_role(identity.role)

    @property
    def is_management(self) -> bool:
        """Check if user is admin or manager."""
        return self._identity.role in MANAGEMENT_ROLES

    def require(self, action: Action, resource: Any, entity: str = "Order") -> None:
        """
        Raise the exception matching a denial, do nothing when allowed.

        Raises:
            NotFoundError: resource not visible to the caller
            RegionAccessError: creating in a region the caller cannot order from
            InsufficientRoleError: status updates by non-management roles
            ForbiddenError: any other denied mutation
        """
        decision = authorize(self._identity, action, resource)
        if decision.allowed:
            return

        if decision.kind == ErrorKind.NOT_FOUND:
            raise NotFoundError(entity, getattr(resource, "id", None))

        if action == Action.CREATE:
            raise RegionAccessError(resource.region, user_region=self._identity.region)

        if action == Action.UPDATE_STATUS and not self.is_management:
            raise InsufficientRoleError(sorted(MANAGEMENT_ROLES))

        raise ForbiddenError(decision.reason, entity_id=getattr(resource, "id", None))

    def visibility_clause(self, model: Any) -> ColumnElement[bool] | None:
        return self._strategy.visibility_clause(self._identity, model)
