"""
Orders router.
Thin controller over OrderService; every endpoint requires a bearer token.
"""

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from shared.config.settings import settings
from shared.infrastructure.db import get_db
from shared.security.auth import current_identity
from shared.security.identity import Identity
from shared.security.rate_limit import limiter
from shared.utils.schemas import (
    CreateOrderRequest,
    ErrorResponse,
    OrderOutput,
    PayOrderRequest,
    UpdateOrderStatusRequest,
)
from order_api.routers._common import Pagination, get_pagination
from order_api.services.domain import OrderService


router = APIRouter(
    prefix="/api/orders",
    tags=["orders"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.order_rate_limit)
def create_order(
    request: Request,
    body: CreateOrderRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> OrderOutput:
    """
    Place an order.

    Prices come from the catalog; any price or restaurant id sent by the
    client is ignored. The order starts PENDING.
    """
    order = OrderService(db).create_order(identity, body)
    return OrderOutput.model_validate(order)


@router.get("", response_model=list[OrderOutput])
def list_orders(
    status_filter: str | None = Query(default=None, alias="status"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> list[OrderOutput]:
    """List orders visible to the caller, newest first."""
    orders = OrderService(db).list_orders(
        identity,
        status=status_filter,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return [OrderOutput.model_validate(o) for o in orders]


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> OrderOutput:
    order = OrderService(db).get_order(identity, order_id)
    return OrderOutput.model_validate(order)


@router.patch("/{order_id}/status", response_model=OrderOutput)
def update_order_status(
    order_id: int,
    body: UpdateOrderStatusRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> OrderOutput:
    """Change an order's status. ADMIN anywhere, MANAGER within their region."""
    order = OrderService(db).update_order_status(identity, order_id, body.status)
    return OrderOutput.model_validate(order)


@router.patch("/{order_id}/cancel", response_model=OrderOutput)
def cancel_order(
    order_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> OrderOutput:
    order = OrderService(db).cancel_order(identity, order_id)
    return OrderOutput.model_validate(order)


@router.patch("/{order_id}/pay", response_model=OrderOutput)
@limiter.limit(settings.order_rate_limit)
def pay_order(
    request: Request,
    order_id: int,
    body: PayOrderRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> OrderOutput:
    """Pay a PENDING order. Only the member who placed it may pay."""
    order = OrderService(db).pay_order(identity, order_id, body.type, body.details)
    return OrderOutput.model_validate(order)
