"""
Pricing Domain Service.

Turns requested (menu_item_id, quantity) lines into priced lines using
the catalog as the only price source. Nothing here writes to the database.
"""

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from sqlalchemy.orm import Session

from shared.config.constants import Limits
from shared.config.logging import get_logger
from shared.security.identity import Identity
from shared.utils.exceptions import MenuItemsNotFoundError, ValidationError
from order_api.repositories import CatalogEntry, CatalogRepository
from order_api.services.permissions import Action, PermissionContext

logger = get_logger(__name__)


class RequestedLine(Protocol):
    menu_item_id: int
    quantity: int


@dataclass(frozen=True)
class PricedLine:
    """An order line with the catalog price frozen at pricing time."""

    menu_item_id: int
    quantity: int
    price_cents: int

    @property
    def line_total_cents(self) -> int:
        return self.price_cents * self.quantity


@dataclass(frozen=True)
class PricedOrder:
    """Priced lines in request order, their total and the common region."""

    lines: list[PricedLine] = field(default_factory=list)
    total_cents: int = 0
    region: str = ""


def _validate_quantity(menu_item_id: int, quantity: object) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(
            f"Quantity for menu item {menu_item_id} must be an integer",
            menu_item_id=menu_item_id,
        )
    if not Limits.MIN_QUANTITY <= quantity <= Limits.MAX_QUANTITY:
        raise ValidationError(
            f"Quantity for menu item {menu_item_id} must be between "
            f"{Limits.MIN_QUANTITY} and {Limits.MAX_QUANTITY}",
            menu_item_id=menu_item_id,
            quantity=quantity,
        )
    return quantity


class PricingService:
    """
    Domain service that prices order lines.

    Checks, in this order:
    1. At least one line, at most Limits.MAX_ORDER_LINES
    2. Every quantity within [MIN_QUANTITY, MAX_QUANTITY]
    3. Every menu item exists (all missing ids are reported at once)
    4. The caller may order from each item's region
    5. All items share one region
    """

    def __init__(self, db: Session):
        self._catalog = CatalogRepository(db)

    def price(self, identity: Identity, items: Sequence[RequestedLine]) -> PricedOrder:
        if not items:
            raise ValidationError("Order must contain at least one item")
        if len(items) > Limits.MAX_ORDER_LINES:
            raise ValidationError(
                f"Order cannot contain more than {Limits.MAX_ORDER_LINES} lines"
            )

        quantities = [_validate_quantity(item.menu_item_id, item.quantity) for item in items]

        requested_ids = [item.menu_item_id for item in items]
        entries: dict[int, CatalogEntry] = {
            entry.id: entry for entry in self._catalog.find_menu_items_by_ids(requested_ids)
        }

        missing = list(dict.fromkeys(i for i in requested_ids if i not in entries))
        if missing:
            raise MenuItemsNotFoundError(missing)

        ctx = PermissionContext(identity)
        for menu_item_id in requested_ids:
            ctx.require(Action.CREATE, entries[menu_item_id], entity="Menu item")

        regions = {entries[i].region for i in requested_ids}
        if len(regions) > 1:
            raise ValidationError(
                "All items of an order must come from restaurants in the same region",
                regions=sorted(regions),
            )

        lines = [
            PricedLine(
                menu_item_id=menu_item_id,
                quantity=quantity,
                price_cents=entries[menu_item_id].price_cents,
            )
            for menu_item_id, quantity in zip(requested_ids, quantities)
        ]
        total = sum(line.line_total_cents for line in lines)

        logger.debug("Order priced", lines=len(lines), total_cents=total)
        return PricedOrder(lines=lines, total_cents=total, region=regions.pop())
