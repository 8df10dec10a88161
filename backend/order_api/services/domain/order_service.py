"""
Order Domain Service.

Owns the order lifecycle: create, read, list, status updates, cancel and
pay. Every write runs inside one transaction(); reads that precede a
write take a row lock on the order so concurrent mutations serialize.
"""

from typing import Any, Sequence

from sqlalchemy.orm import Session

from shared.config.constants import Limits, OrderStatus, validate_order_status
from shared.config.logging import orders_logger as logger, mask_user_id
from shared.infrastructure.db import transaction
from shared.security.identity import Identity
from shared.utils.exceptions import OrderNotFoundError, ValidationError
from shared.utils.schemas import CreateOrderRequest
from order_api.models import Order
from order_api.repositories import OrderFilters, OrderRepository
from order_api.services.permissions import Action, PermissionContext
from .order_state import require_cancellable, require_payable, require_status_change
from .payment_details import normalize_payment_details
from .pricing_service import PricingService


class OrderService:
    """
    Domain service for Order operations.

    Routers stay thin: they parse the request, call one method here and
    serialize the returned Order.
    """

    def __init__(self, db: Session):
        self._db = db
        self._repo = OrderRepository(db)
        self._pricing = PricingService(db)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_order(self, identity: Identity, order_id: int) -> Order:
        """
        Get one order. Orders outside the caller's scope are reported as
        not found.
        """
        order = self._repo.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        PermissionContext(identity).require(Action.READ, order)
        return order

    def list_orders(
        self,
        identity: Identity,
        status: str | None = None,
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = Limits.DEFAULT_OFFSET,
    ) -> Sequence[Order]:
        """
        List the orders visible to the caller, newest first.

        ADMIN sees everything, MANAGER their region, MEMBER their own orders.
        """
        if status is not None and not validate_order_status(status):
            raise ValidationError(f"Unknown order status '{status}'", field="status")

        filters = OrderFilters(
            status=status,
            limit=limit,
            offset=offset,
            clause=PermissionContext(identity).visibility_clause(Order),
        )
        return self._repo.find_by_filter(filters)

    # =========================================================================
    # Writes
    # =========================================================================

    def create_order(self, identity: Identity, request: CreateOrderRequest) -> Order:
        """
        Price the requested lines against the catalog and store the order,
        its items and the optional intended payment method atomically.

        The order always starts PENDING, also when a payment method is given.
        """
        payment: tuple[str, dict[str, Any]] | None = None
        if request.payment is not None:
            payment = normalize_payment_details(request.payment.type, request.payment.details)

        with transaction(self._db, "create order"):
            priced = self._pricing.price(identity, request.items)

            if request.region is not None and request.region != priced.region:
                raise ValidationError(
                    f"Order region '{request.region}' does not match the region "
                    f"of its items '{priced.region}'",
                    field="region",
                )

            order = self._repo.create_order_with_items(identity.id, priced, payment)
            order_id = order.id

        logger.info(
            "Order created",
            order_id=order_id,
            user_id=mask_user_id(identity.id),
            region=priced.region,
            total_cents=priced.total_cents,
            lines=len(priced.lines),
            payment_type=payment[0] if payment else None,
        )
        return self._reload(order_id)

    def update_order_status(self, identity: Identity, order_id: int, status: str) -> Order:
        """Set the status of an order (ADMIN anywhere, MANAGER in own region)."""
        with transaction(self._db, "update order status"):
            order = self._lock_order(order_id)
            PermissionContext(identity).require(Action.UPDATE_STATUS, order)
            previous = order.status
            require_status_change(previous, status)
            self._repo.update_status(order, status)

        logger.info(
            "Order status updated",
            order_id=order_id,
            from_status=previous,
            to_status=status,
            role=identity.role,
        )
        return self._reload(order_id)

    def cancel_order(self, identity: Identity, order_id: int) -> Order:
        """Cancel a PENDING order."""
        with transaction(self._db, "cancel order"):
            order = self._lock_order(order_id)
            PermissionContext(identity).require(Action.CANCEL, order)
            require_cancellable(order.status)
            self._repo.update_status(order, OrderStatus.CANCELLED)

        logger.info("Order cancelled", order_id=order_id, role=identity.role)
        return self._reload(order_id)

    def pay_order(
        self,
        identity: Identity,
        order_id: int,
        payment_type: str,
        details: dict[str, Any] | None = None,
    ) -> Order:
        """
        Pay a PENDING order: upsert its payment method and mark it PAID.

        The order row stays locked from the status check until commit, so
        a concurrent second payment sees PAID and is rejected.
        """
        with transaction(self._db, "pay order"):
            order = self._lock_order(order_id)
            PermissionContext(identity).require(Action.PAY, order)
            require_payable(order.status)

            stored_type, stored_details = normalize_payment_details(payment_type, details)
            self._repo.create_or_complete_payment(order.id, stored_type, stored_details)
            self._repo.update_status(order, OrderStatus.PAID)

        logger.info(
            "Order paid",
            order_id=order_id,
            user_id=mask_user_id(identity.id),
            payment_type=stored_type,
        )
        return self._reload(order_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _lock_order(self, order_id: int) -> Order:
        order = self._repo.find_by_id(order_id, for_update=True)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def _reload(self, order_id: int) -> Order:
        order = self._repo.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order
