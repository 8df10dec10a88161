"""
API routers - /api/orders/*, /api/restaurants/*
"""

from .orders import router as orders_router
from .restaurants import router as restaurants_router

__all__ = ["orders_router", "restaurants_router"]
