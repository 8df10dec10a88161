"""
Domain Services.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from order_api.services.domain import OrderService

    service = OrderService(db)
    order = service.pay_order(identity, order_id, "UPI", {"upiId": "thor@upi"})
"""

from .pricing_service import PricingService, PricedLine, PricedOrder
from .order_service import OrderService
from .catalog_service import CatalogService
from .payment_details import mask_card_number, normalize_payment_details, normalize_payment_type
from .order_state import require_cancellable, require_payable, require_status_change

__all__ = [
    "PricingService",
    "PricedLine",
    "PricedOrder",
    "OrderService",
    "CatalogService",
    "mask_card_number",
    "normalize_payment_details",
    "normalize_payment_type",
    "require_cancellable",
    "require_payable",
    "require_status_change",
]
