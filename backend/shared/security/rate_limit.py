"""
Rate limiting utilities using slowapi.
Protects the order mutation endpoints from abuse.

Usage in a router:
    from shared.security.rate_limit import limiter

    @router.post("/orders")
    @limiter.limit(settings.order_rate_limit)
    def create_order(request: Request, ...):
        ...
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse

from shared.config.settings import settings
from shared.config.logging import get_logger

logger = get_logger(__name__)

# Limiter keyed by client IP
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Custom handler for rate limit exceeded errors.
    Returns a JSON response with retry information.
    """
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        client=get_remote_address(request),
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Rate limit exceeded. Please try again later.",
            "limit": str(exc.detail),
        },
    )
