"""
Restaurants router.
Read-only, region-scoped browsing of restaurants and menus.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.security.auth import current_identity
from shared.security.identity import Identity
from shared.utils.schemas import ErrorResponse, RestaurantListResponse, RestaurantOutput
from order_api.routers._common import Pagination, get_pagination
from order_api.services.domain import CatalogService


router = APIRouter(
    prefix="/api/restaurants",
    tags=["restaurants"],
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.get("", response_model=RestaurantListResponse)
def list_restaurants(
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> RestaurantListResponse:
    """List restaurants with their menus. Non-admins only see their region."""
    restaurants, total = CatalogService(db).list_restaurants(
        identity, limit=pagination.limit, offset=pagination.offset
    )
    return RestaurantListResponse(
        items=[RestaurantOutput.model_validate(r) for r in restaurants],
        pagination=pagination.to_dict(total=total),
    )


@router.get("/{restaurant_id}", response_model=RestaurantOutput)
def get_restaurant(
    restaurant_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(current_identity),
) -> RestaurantOutput:
    restaurant = CatalogService(db).get_restaurant(identity, restaurant_id)
    return RestaurantOutput.model_validate(restaurant)
