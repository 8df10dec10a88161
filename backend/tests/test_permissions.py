"""
Tests for the permission strategies and authorize().

The checks are pure, so resources are plain namespaces carrying the
attributes the strategies look at.
"""

from types import SimpleNamespace

import pytest

from order_api.models import Order, Restaurant
from order_api.services.permissions import (
    Action,
    AdminStrategy,
    ManagerStrategy,
    MemberStrategy,
    NoAccessStrategy,
    PermissionContext,
    authorize,
    get_strategy_for_role,
)
from shared.config.constants import Regions, Roles
from shared.security.identity import Identity
from shared.utils.exceptions import (
    ErrorKind,
    ForbiddenError,
    InsufficientRoleError,
    NotFoundError,
    RegionAccessError,
)


def order_of(user_id: str, region: str, order_id: int = 1):
    return SimpleNamespace(id=order_id, user_id=user_id, region=region)


def restaurant_in(region: str):
    return SimpleNamespace(id=7, region=region)


def sql(clause) -> str:
    return str(clause.compile(compile_kwargs={"literal_binds": True}))


class TestStrategyRegistry:
    """Role to strategy lookup."""

    @pytest.mark.parametrize(
        "role, expected",
        [
            (Roles.ADMIN, AdminStrategy),
            (Roles.MANAGER, ManagerStrategy),
            (Roles.MEMBER, MemberStrategy),
            ("AUDITOR", NoAccessStrategy),
        ],
    )
    def test_get_strategy_for_role(self, role, expected):
        assert isinstance(get_strategy_for_role(role), expected)


class TestVisibility:
    """Who sees which orders and restaurants."""

    def test_admin_sees_everything(self, admin):
        assert authorize(admin, Action.READ, order_of("travis", Regions.AMERICA)).allowed
        assert authorize(admin, Action.READ, restaurant_in(Regions.AMERICA)).allowed

    def test_manager_sees_own_region_only(self, manager_india):
        assert authorize(manager_india, Action.READ, order_of("thanos", Regions.INDIA)).allowed
        decision = authorize(manager_india, Action.READ, order_of("travis", Regions.AMERICA))
        assert not decision.allowed
        assert decision.kind == ErrorKind.NOT_FOUND

    def test_member_sees_own_orders_only(self, member_india):
        assert authorize(member_india, Action.READ, order_of("thanos", Regions.INDIA)).allowed
        decision = authorize(member_india, Action.READ, order_of("thor", Regions.INDIA))
        assert decision.kind == ErrorKind.NOT_FOUND

    def test_member_restaurants_fall_back_to_region(self, member_india):
        assert authorize(member_india, Action.LIST, restaurant_in(Regions.INDIA)).allowed
        assert not authorize(member_india, Action.LIST, restaurant_in(Regions.AMERICA)).allowed

    def test_unknown_role_sees_nothing(self):
        stranger = Identity(id="x", role="AUDITOR", region=Regions.INDIA)
        assert not authorize(stranger, Action.READ, order_of("x", Regions.INDIA)).allowed


class TestVisibilityClause:
    """SQL form of the visibility filter."""

    def test_admin_has_no_clause(self, admin):
        assert PermissionContext(admin).visibility_clause(Order) is None

    def test_manager_clause_filters_region(self, manager_america):
        clause = PermissionContext(manager_america).visibility_clause(Order)
        assert sql(clause) == "app_order.region = 'AMERICA'"

    def test_member_clause_filters_owner_on_orders(self, member_india):
        clause = PermissionContext(member_india).visibility_clause(Order)
        assert sql(clause) == "app_order.user_id = 'thanos'"

    def test_member_clause_filters_region_on_restaurants(self, member_india):
        clause = PermissionContext(member_india).visibility_clause(Restaurant)
        assert sql(clause) == "restaurant.region = 'INDIA'"


class TestMutationMatrix:
    """(role, region, ownership) against each mutating action."""

    @pytest.mark.parametrize(
        "identity_fixture, allowed",
        [
            ("admin", True),
            ("manager_india", True),
            ("manager_america", False),
            ("member_india", False),
        ],
    )
    def test_update_status(self, request, identity_fixture, allowed):
        identity = request.getfixturevalue(identity_fixture)
        decision = authorize(identity, Action.UPDATE_STATUS, order_of("thanos", Regions.INDIA))
        assert decision.allowed is allowed
        if not allowed:
            assert decision.kind == ErrorKind.FORBIDDEN

    @pytest.mark.parametrize(
        "identity_fixture, allowed",
        [
            ("admin", True),
            ("manager_india", True),
            ("manager_america", False),
            ("member_india", True),
            ("other_member_india", False),
        ],
    )
    def test_cancel(self, request, identity_fixture, allowed):
        identity = request.getfixturevalue(identity_fixture)
        decision = authorize(identity, Action.CANCEL, order_of("thanos", Regions.INDIA))
        assert decision.allowed is allowed

    @pytest.mark.parametrize(
        "identity_fixture, allowed",
        [
            ("admin", False),
            ("manager_india", False),
            ("member_india", True),
            ("other_member_india", False),
        ],
    )
    def test_pay_is_owner_only(self, request, identity_fixture, allowed):
        identity = request.getfixturevalue(identity_fixture)
        decision = authorize(identity, Action.PAY, order_of("thanos", Regions.INDIA))
        assert decision.allowed is allowed

    @pytest.mark.parametrize(
        "identity_fixture, region, allowed",
        [
            ("admin", Regions.AMERICA, True),
            ("manager_america", Regions.INDIA, False),
            ("manager_america", Regions.AMERICA, True),
            ("member_india", Regions.INDIA, True),
            ("member_india", Regions.AMERICA, False),
        ],
    )
    def test_create(self, request, identity_fixture, region, allowed):
        identity = request.getfixturevalue(identity_fixture)
        decision = authorize(identity, Action.CREATE, SimpleNamespace(region=region))
        assert decision.allowed is allowed


class TestPermissionContextRequire:
    """Denials become the matching exception."""

    def test_hidden_read_raises_not_found(self, member_india):
        with pytest.raises(NotFoundError) as exc_info:
            PermissionContext(member_india).require(Action.READ, order_of("thor", Regions.INDIA, 42))
        assert exc_info.value.status_code == 404
        assert "42" in exc_info.value.detail

    def test_create_in_other_region_raises_region_access(self, manager_america):
        with pytest.raises(RegionAccessError) as exc_info:
            PermissionContext(manager_america).require(Action.CREATE, SimpleNamespace(region=Regions.INDIA))
        assert exc_info.value.status_code == 403
        assert exc_info.value.kind == ErrorKind.FORBIDDEN

    def test_member_status_update_raises_insufficient_role(self, member_india):
        with pytest.raises(InsufficientRoleError):
            PermissionContext(member_india).require(
                Action.UPDATE_STATUS, order_of("thanos", Regions.INDIA)
            )

    def test_foreign_manager_status_update_raises_forbidden(self, manager_america):
        with pytest.raises(ForbiddenError) as exc_info:
            PermissionContext(manager_america).require(
                Action.UPDATE_STATUS, order_of("thanos", Regions.INDIA)
            )
        assert not isinstance(exc_info.value, InsufficientRoleError)

    def test_allowed_action_returns_none(self, admin):
        assert PermissionContext(admin).require(Action.CANCEL, order_of("travis", Regions.AMERICA)) is None
