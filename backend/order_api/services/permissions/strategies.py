"""
Permission Strategy implementations.
Strategy Pattern for role-based access control.

Each strategy answers, for one role:
- is_visible / visibility_clause: which orders and restaurants the caller sees
- can_create: whether the caller may order from a region
- can_update_status / can_cancel / can_pay: mutations on an existing order

Strategies are pure: they only look at the Identity and the resource
attributes (region, user_id) and never touch the database.
"""

from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

from sqlalchemy import ColumnElement, false

from shared.config.constants import Roles
from shared.security.identity import Identity


# =============================================================================
# Resource Protocols
# =============================================================================


@runtime_checkable
class HasOwner(Protocol):
    """Protocol for resources owned by a user (orders)."""
    user_id: str


# =============================================================================
# Mixins
# =============================================================================


class ScopeAccessMixin:
    """Helpers for region and ownership checks."""

    def _same_region(self, identity: Identity, resource: Any) -> bool:
        return getattr(resource, "region", None) == identity.region

    def _is_owner(self, identity: Identity, resource: Any) -> bool:
        return isinstance(resource, HasOwner) and resource.user_id == identity.id


class NoPayMixin:
    """Mixin for roles that never pay for an order."""

    def can_pay(self, identity: Identity, resource: Any) -> bool:
        return False


class RegionScopeMixin(ScopeAccessMixin):
    """Visibility limited to the caller's region."""

    def is_visible(self, identity: Identity, resource: Any) -> bool:
        return self._same_region(identity, resource)

    def visibility_clause(self, identity: Identity, model: Any) -> ColumnElement[bool] | None:
        return model.region == identity.region


# =============================================================================
# Base Permission Strategy
# =============================================================================


class PermissionStrategy(ABC, ScopeAccessMixin):
    """
    Abstract base for permission strategies.

    Each implementation defines access rules for a specific role.
    """

    @abstractmethod
    def is_visible(self, identity: Identity, resource: Any) -> bool:
        """In-memory visibility predicate."""
        ...

    @abstractmethod
    def visibility_clause(self, identity: Identity, model: Any) -> ColumnElement[bool] | None:
        """WHERE clause equivalent of is_visible. None means unrestricted."""
        ...

    @abstractmethod
    def can_create(self, identity: Identity, region: str) -> bool:
        """Check if the caller may order from restaurants of `region`."""
        ...

    @abstractmethod
    def can_update_status(self, identity: Identity, resource: Any) -> bool:
        ...

    @abstractmethod
    def can_cancel(self, identity: Identity, resource: Any) -> bool:
        ...

    @abstractmethod
    def can_pay(self, identity: Identity, resource: Any) -> bool:
        ...


class AdminStrategy(NoPayMixin, PermissionStrategy):
    """
    Admin sees and manages every region.
    Payment is left to the owner of the order.
    """

    def is_visible(self, identity: Identity, resource: Any) -> bool:
        return True

    def visibility_clause(self, identity: Identity, model: Any) -> ColumnElement[bool] | None:
        return None

    def can_create(self, identity: Identity, region: str) -> bool:
        return True

    def can_update_status(self, identity: Identity, resource: Any) -> bool:
        return True

    def can_cancel(self, identity: Identity, resource: Any) -> bool:
        return True


class ManagerStrategy(NoPayMixin, RegionScopeMixin, PermissionStrategy):
    """
    Manager operates within their own region:
    - Sees every order and restaurant of the region
    - Can update status and cancel orders of the region
    - Cannot pay
    """

    def can_create(self, identity: Identity, region: str) -> bool:
        return region == identity.region

    def can_update_status(self, identity: Identity, resource: Any) -> bool:
        return self._same_region(identity, resource)

    def can_cancel(self, identity: Identity, resource: Any) -> bool:
        return self._same_region(identity, resource)


class MemberStrategy(PermissionStrategy):
    """
    Member works on their own orders:
    - Sees only orders they placed; restaurants of their region
    - Can cancel and pay their own orders
    - Cannot change status directly
    """

    def is_visible(self, identity: Identity, resource: Any) -> bool:
        if isinstance(resource, HasOwner):
            return self._is_owner(identity, resource)
        # Ownerless resources (restaurants) fall back to the region rule
        return self._same_region(identity, resource)

    def visibility_clause(self, identity: Identity, model: Any) -> ColumnElement[bool] | None:
        if hasattr(model, "user_id"):
            return model.user_id == identity.id
        return model.region == identity.region

    def can_create(self, identity: Identity, region: str) -> bool:
        return region == identity.region

    def can_update_status(self, identity: Identity, resource: Any) -> bool:
        return False

    def can_cancel(self, identity: Identity, resource: Any) -> bool:
        return self._is_owner(identity, resource)

    def can_pay(self, identity: Identity, resource: Any) -> bool:
        return self._is_owner(identity, resource)


class NoAccessStrategy(NoPayMixin, PermissionStrategy):
    """
    Fallback for roles this service does not know.
    Sees nothing and can do nothing.
    """

    def is_visible(self, identity: Identity, resource: Any) -> bool:
        return False

    def visibility_clause(self, identity: Identity, model: Any) -> ColumnElement[bool] | None:
        return false()

    def can_create(self, identity: Identity, region: str) -> bool:
        return False

    def can_update_status(self, identity: Identity, resource: Any) -> bool:
        return False

    def can_cancel(self, identity: Identity, resource: Any) -> bool:
        return False


# Strategy registry
STRATEGY_REGISTRY: dict[str, type[PermissionStrategy]] = {
    Roles.ADMIN: AdminStrategy,
    Roles.MANAGER: ManagerStrategy,
    Roles.MEMBER: MemberStrategy,
}


def get_strategy_for_role(role: str) -> PermissionStrategy:
    """Get permission strategy for a role."""
    strategy_class = STRATEGY_REGISTRY.get(role, NoAccessStrategy)
    return strategy_class()
