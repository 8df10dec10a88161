"""
Order API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shared.config.settings import settings
from shared.config.logging import rest_api_logger as logger
from shared.infrastructure.db import get_db
from shared.security.rate_limit import limiter, rate_limit_exceeded_handler
from order_api.core import lifespan, configure_cors, register_middlewares
from order_api.routers import orders_router, restaurants_router


# Create FastAPI application
app = FastAPI(
    title="Order API",
    description="Region-scoped food ordering with role-based access",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Middlewares (CORS registered last so it wraps everything)
register_middlewares(app)
configure_cors(app)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "order-api",
        "environment": settings.environment,
    }


@app.get("/api/health/detailed")
def detailed_health_check(db: Session = Depends(get_db)):
    """
    Health check that verifies database connectivity.
    Returns 503 when the database is unreachable.
    """
    checks = {
        "service": "order-api",
        "environment": settings.environment,
        "dependencies": {},
    }

    try:
        db.execute(text("SELECT 1"))
        checks["dependencies"]["database"] = {"status": "healthy"}
        checks["status"] = "healthy"
    except SQLAlchemyError as e:
        logger.error("Database health check failed", error=str(e))
        checks["dependencies"]["database"] = {"status": "unhealthy", "error": type(e).__name__}
        checks["status"] = "degraded"
        return JSONResponse(content=checks, status_code=503)

    return checks


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(orders_router)
app.include_router(restaurants_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "order_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
