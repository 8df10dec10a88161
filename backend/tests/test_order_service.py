"""
Tests for OrderService: the order lifecycle against a real session.
"""

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from order_api.models import Base, MenuItem, Order, OrderItem, PaymentMethod
from order_api.repositories import OrderRepository
from order_api.seed import seed
from order_api.services.domain import OrderService
from shared.config.constants import OrderStatus, Regions
from shared.config.settings import settings
from shared.utils.exceptions import (
    DatabaseError,
    ForbiddenError,
    InsufficientRoleError,
    InvalidStateError,
    InvalidTransitionError,
    NotFoundError,
    OrderNotFoundError,
    ValidationError,
)
from shared.utils.schemas import CreateOrderRequest, OrderItemInput, PaymentInput


def order_request(*lines, payment=None, region=None) -> CreateOrderRequest:
    return CreateOrderRequest(
        items=[OrderItemInput(menu_item_id=m.id, quantity=q) for m, q in lines],
        payment=payment,
        region=region,
    )


def count(db_session, model) -> int:
    return db_session.scalar(select(func.count()).select_from(model))


@pytest.fixture
def service(db_session):
    return OrderService(db_session)


@pytest.fixture
def pending_order(service, catalog, member_india):
    """A PENDING order placed by member_india."""
    return service.create_order(
        member_india, order_request((catalog["Butter Chicken"], 2), (catalog["Biryani"], 1))
    )


class TestCreateOrder:
    """Order creation."""

    def test_create_order_prices_from_catalog(self, service, catalog, member_india):
        order = service.create_order(
            member_india, order_request((catalog["Butter Chicken"], 2), (catalog["Biryani"], 1))
        )

        assert order.status == OrderStatus.PENDING
        assert order.user_id == "thanos"
        assert order.region == Regions.INDIA
        assert order.total_cents == 100000
        assert [(i.menu_item_name, i.quantity, i.price_cents) for i in order.items] == [
            ("Butter Chicken", 2, 35000),
            ("Biryani", 1, 30000),
        ]
        assert order.payment_method is None

    def test_create_with_payment_stays_pending(self, service, catalog, member_india):
        """The payment method is recorded but the order is not paid yet."""
        order = service.create_order(
            member_india,
            order_request(
                (catalog["Biryani"], 1),
                payment=PaymentInput(type="CARD", details={"cardNumber": "4111 1111 1111 1111"}),
            ),
        )

        assert order.status == OrderStatus.PENDING
        assert order.payment_method.type == "CARD"
        assert order.payment_method.details == {"cardNumber": "************1111"}

    def test_invalid_payment_writes_nothing(self, service, db_session, catalog, member_india):
        with pytest.raises(ValidationError):
            service.create_order(
                member_india,
                order_request((catalog["Biryani"], 1), payment=PaymentInput(type="UPI", details={})),
            )
        assert count(db_session, Order) == 0

    def test_unknown_menu_item_writes_nothing(self, service, db_session, catalog, member_india):
        request = CreateOrderRequest(
            items=[
                OrderItemInput(menu_item_id=catalog["Biryani"].id, quantity=1),
                OrderItemInput(menu_item_id=424242, quantity=1),
            ],
            payment=PaymentInput(type="CASH"),
        )

        with pytest.raises(NotFoundError):
            service.create_order(member_india, request)

        assert count(db_session, Order) == 0
        assert count(db_session, OrderItem) == 0
        assert count(db_session, PaymentMethod) == 0

    def test_manager_cannot_order_from_other_region(self, service, catalog, manager_america):
        with pytest.raises(ForbiddenError):
            service.create_order(manager_america, order_request((catalog["Paneer Tikka"], 1)))

    def test_admin_can_order_from_any_region(self, service, catalog, admin):
        order = service.create_order(admin, order_request((catalog["Cheese Burger"], 2)))
        assert order.region == Regions.AMERICA
        assert order.total_cents == 2000

    def test_explicit_region_must_match_items(self, service, db_session, catalog, admin):
        with pytest.raises(ValidationError):
            service.create_order(
                admin, order_request((catalog["Cheese Burger"], 1), region=Regions.INDIA)
            )
        assert count(db_session, Order) == 0

    def test_price_snapshot_survives_catalog_change(self, service, db_session, catalog, member_india):
        """Later menu price changes do not touch existing orders."""
        biryani = catalog["Biryani"]
        order = service.create_order(member_india, order_request((biryani, 3)))

        db_session.get(MenuItem, biryani.id).price_cents = 99999
        db_session.commit()

        reloaded = service.get_order(member_india, order.id)
        assert reloaded.items[0].price_cents == 30000
        assert reloaded.total_cents == 90000

    def test_storage_fault_rolls_back_everything(
        self, service, db_session, catalog, member_india, monkeypatch
    ):
        """A failure after the order row is flushed leaves no rows behind."""
        original = OrderRepository.create_order_with_items

        def failing(self, *args, **kwargs):
            original(self, *args, **kwargs)
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(OrderRepository, "create_order_with_items", failing)

        with pytest.raises(DatabaseError) as exc_info:
            service.create_order(
                member_india,
                order_request((catalog["Biryani"], 1), payment=PaymentInput(type="CASH")),
            )

        assert exc_info.value.status_code == 500
        assert count(db_session, Order) == 0
        assert count(db_session, OrderItem) == 0
        assert count(db_session, PaymentMethod) == 0


class TestReadOrders:
    """Scoped reads and listings."""

    @pytest.fixture
    def orders(self, service, catalog, member_india, other_member_india, member_america):
        return {
            "thanos": service.create_order(member_india, order_request((catalog["Biryani"], 1))),
            "thor": service.create_order(other_member_india, order_request((catalog["Paneer Tikka"], 1))),
            "travis": service.create_order(member_america, order_request((catalog["Fries"], 1))),
        }

    def test_member_lists_only_own_orders(self, service, orders, member_india):
        assert [o.user_id for o in service.list_orders(member_india)] == ["thanos"]

    def test_manager_lists_own_region(self, service, orders, manager_india):
        listed = service.list_orders(manager_india)
        assert {o.user_id for o in listed} == {"thanos", "thor"}
        assert all(o.region == Regions.INDIA for o in listed)

    def test_admin_lists_everything_newest_first(self, service, orders, admin):
        listed = service.list_orders(admin)
        assert len(listed) == 3
        assert listed[0].id == orders["travis"].id

    def test_list_filters_by_status_and_paginates(self, service, orders, admin, member_india):
        service.cancel_order(member_india, orders["thanos"].id)

        cancelled = service.list_orders(admin, status=OrderStatus.CANCELLED)
        assert [o.id for o in cancelled] == [orders["thanos"].id]
        assert len(service.list_orders(admin, limit=2)) == 2
        assert len(service.list_orders(admin, limit=2, offset=2)) == 1

    def test_list_rejects_unknown_status(self, service, admin):
        with pytest.raises(ValidationError):
            service.list_orders(admin, status="SHIPPED")

    def test_other_members_order_is_not_found(self, service, orders, member_india):
        with pytest.raises(NotFoundError):
            service.get_order(member_india, orders["thor"].id)

    def test_other_region_order_is_not_found_for_manager(self, service, orders, manager_america):
        with pytest.raises(NotFoundError):
            service.get_order(manager_america, orders["thanos"].id)

    def test_missing_order(self, service, catalog, admin):
        with pytest.raises(OrderNotFoundError):
            service.get_order(admin, 999)


class TestCancelOrder:
    """Cancellation rules."""

    def test_cancel_pending(self, service, pending_order, member_india):
        assert service.cancel_order(member_india, pending_order.id).status == OrderStatus.CANCELLED

    def test_second_cancel_rejected(self, service, pending_order, manager_india):
        service.cancel_order(manager_india, pending_order.id)
        with pytest.raises(ValidationError):
            service.cancel_order(manager_india, pending_order.id)

    def test_cancel_paid_rejected(self, service, pending_order, member_india):
        service.pay_order(member_india, pending_order.id, "CASH")
        with pytest.raises(InvalidStateError):
            service.cancel_order(member_india, pending_order.id)

    def test_foreign_member_cannot_cancel(self, service, pending_order, other_member_india):
        with pytest.raises(ForbiddenError):
            service.cancel_order(other_member_india, pending_order.id)

    def test_foreign_manager_cannot_cancel(self, service, db_session, pending_order, manager_america):
        with pytest.raises(ForbiddenError):
            service.cancel_order(manager_america, pending_order.id)
        assert db_session.get(Order, pending_order.id).status == OrderStatus.PENDING


class TestPayOrder:
    """Payment rules."""

    def test_owner_pays(self, service, pending_order, member_india):
        order = service.pay_order(
            member_india, pending_order.id, "CARD", {"cardNumber": "1234567890123456"}
        )
        assert order.status == OrderStatus.PAID
        assert order.payment_method.type == "CARD"
        assert order.payment_method.details == {"cardNumber": "************3456"}

    def test_second_pay_rejected_and_payment_unchanged(self, service, db_session, pending_order, member_india):
        service.pay_order(member_india, pending_order.id, "UPI", {"upiId": "thanos@upi"})

        with pytest.raises(ValidationError):
            service.pay_order(member_india, pending_order.id, "CASH")

        payment = db_session.scalar(select(PaymentMethod).where(PaymentMethod.order_id == pending_order.id))
        assert payment.type == "UPI"
        assert payment.details == {"upiId": "thanos@upi"}
        assert count(db_session, PaymentMethod) == 1

    def test_pay_completes_intended_payment(self, service, db_session, catalog, member_india):
        """Paying upserts the payment method recorded at creation."""
        order = service.create_order(
            member_india,
            order_request((catalog["Biryani"], 1), payment=PaymentInput(type="CASH")),
        )

        paid = service.pay_order(member_india, order.id, "NETBANKING", {"bankName": "HDFC"})

        assert paid.payment_method.type == "NETBANKING"
        assert count(db_session, PaymentMethod) == 1

    def test_pay_cancelled_rejected(self, service, pending_order, member_india):
        service.cancel_order(member_india, pending_order.id)
        with pytest.raises(ValidationError):
            service.pay_order(member_india, pending_order.id, "CASH")

    @pytest.mark.parametrize("identity_fixture", ["admin", "manager_india", "other_member_india"])
    def test_only_owner_may_pay(self, request, service, pending_order, identity_fixture):
        with pytest.raises(ForbiddenError):
            service.pay_order(request.getfixturevalue(identity_fixture), pending_order.id, "CASH")

    def test_bad_details_leave_order_pending(self, service, db_session, pending_order, member_india):
        with pytest.raises(ValidationError):
            service.pay_order(member_india, pending_order.id, "CARD", {"cardNumber": "12"})

        assert db_session.get(Order, pending_order.id).status == OrderStatus.PENDING
        assert count(db_session, PaymentMethod) == 0


class TestUpdateOrderStatus:
    """Direct status updates by management."""

    def test_manager_sets_status_in_region(self, service, pending_order, manager_india):
        order = service.update_order_status(manager_india, pending_order.id, OrderStatus.CANCELLED)
        assert order.status == OrderStatus.CANCELLED

    def test_keeping_status_is_allowed(self, service, pending_order, admin):
        assert service.update_order_status(admin, pending_order.id, OrderStatus.PENDING).status == OrderStatus.PENDING

    def test_member_cannot_update_status(self, service, pending_order, member_india):
        with pytest.raises(InsufficientRoleError):
            service.update_order_status(member_india, pending_order.id, OrderStatus.CANCELLED)

    def test_foreign_manager_cannot_update_status(self, service, pending_order, manager_america):
        with pytest.raises(ForbiddenError):
            service.update_order_status(manager_america, pending_order.id, OrderStatus.PAID)

    def test_unknown_status_rejected(self, service, pending_order, admin):
        with pytest.raises(ValidationError):
            service.update_order_status(admin, pending_order.id, "SHIPPED")

    def test_terminal_state_cannot_be_left(self, service, pending_order, admin):
        service.update_order_status(admin, pending_order.id, OrderStatus.CANCELLED)
        with pytest.raises(InvalidTransitionError):
            service.update_order_status(admin, pending_order.id, OrderStatus.PENDING)

    def test_permissive_mode_allows_any_known_status(self, service, pending_order, admin, monkeypatch):
        monkeypatch.setattr(settings, "strict_status_transitions", False)

        service.update_order_status(admin, pending_order.id, OrderStatus.CANCELLED)
        order = service.update_order_status(admin, pending_order.id, OrderStatus.PENDING)

        assert order.status == OrderStatus.PENDING


class TestOrderRepositoryFilters:
    """Direct filters on the repository."""

    def test_find_by_filter_region_owner_status(
        self, service, db_session, catalog, member_india, other_member_india, member_america
    ):
        from order_api.repositories import OrderFilters

        service.create_order(member_india, order_request((catalog["Biryani"], 1)))
        service.create_order(other_member_india, order_request((catalog["Biryani"], 1)))
        service.create_order(member_america, order_request((catalog["Hotdog"], 1)))
        repo = OrderRepository(db_session)

        assert len(repo.find_by_filter(OrderFilters(region=Regions.INDIA))) == 2
        assert [o.user_id for o in repo.find_by_filter(OrderFilters(user_id="travis"))] == ["travis"]
        assert repo.find_by_filter(OrderFilters(status=OrderStatus.PAID)) == []
        assert repo.count(OrderFilters(region=Regions.AMERICA)) == 1

    def test_filters_clamp_pagination(self):
        from order_api.repositories import OrderFilters

        filters = OrderFilters(limit=0, offset=-5)
        assert filters.limit == 1
        assert filters.offset == 0


class TestConcurrentMutations:
    """Two sessions racing on one order, as two request workers would."""

    @pytest.fixture
    def sessions(self, tmp_path):
        file_engine = create_engine(f"sqlite:///{tmp_path / 'orders.db'}")
        Base.metadata.create_all(bind=file_engine)
        make_session = sessionmaker(autoflush=False, bind=file_engine)

        with make_session() as setup:
            seed(setup)

        first, second = make_session(), make_session()
        try:
            yield first, second, make_session
        finally:
            first.close()
            second.close()
            file_engine.dispose()

    def place_order(self, db, member_india) -> int:
        biryani = db.scalar(select(MenuItem).where(MenuItem.name == "Biryani"))
        return OrderService(db).create_order(member_india, order_request((biryani, 1))).id

    def test_stale_session_cannot_pay_twice(self, sessions, member_india):
        first, second, make_session = sessions
        order_id = self.place_order(first, member_india)

        # First worker holds the order in its identity map as PENDING
        assert OrderService(first).get_order(member_india, order_id).status == OrderStatus.PENDING

        OrderService(second).pay_order(member_india, order_id, "UPI", {"upiId": "thanos@upi"})

        with pytest.raises(InvalidStateError):
            OrderService(first).pay_order(member_india, order_id, "CASH")

        with make_session() as check:
            payment = check.scalar(select(PaymentMethod).where(PaymentMethod.order_id == order_id))
            assert payment.type == "UPI"
            assert payment.details == {"upiId": "thanos@upi"}
            assert check.get(Order, order_id).status == OrderStatus.PAID

    def test_stale_session_cannot_cancel_paid_order(self, sessions, member_india):
        first, second, make_session = sessions
        order_id = self.place_order(first, member_india)
        OrderService(first).get_order(member_india, order_id)

        OrderService(second).pay_order(member_india, order_id, "CASH")

        with pytest.raises(InvalidStateError):
            OrderService(first).cancel_order(member_india, order_id)

        with make_session() as check:
            assert check.get(Order, order_id).status == OrderStatus.PAID
