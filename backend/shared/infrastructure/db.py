"""
Database configuration and session management.
Uses SQLAlchemy 2.0 patterns with one session per request.
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from shared.config.settings import DATABASE_URL
from shared.config.logging import get_logger
from shared.utils.exceptions import DatabaseError

import os

logger = get_logger(__name__)


def _calculate_pool_size() -> int:
    """
    Calculate pool size based on CPU cores.
    Formula: (2 * CPU cores) + 1, capped at 20.
    """
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, 20)


def _engine_options(url: str) -> dict[str, Any]:
    """Connection options per backend. SQLite is used for local runs and tests."""
    if url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_pre_ping": True,  # Verify connections before using
        "pool_size": _calculate_pool_size(),
        "max_overflow": 15,
        "pool_timeout": 30,  # Wait max 30s for connection from pool
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
        "connect_args": {"connect_timeout": 10},
        # Lifecycle operations read then write the same order row
        "isolation_level": "READ COMMITTED",
    }


engine = create_engine(DATABASE_URL, echo=False, **_engine_options(DATABASE_URL))

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/orders")
        def list_orders(db: Session = Depends(get_db)):
            ...

    The session is automatically closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI.

    Usage:
        with get_db_context() as db:
            seed(db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """
    Commit with automatic rollback on failure.

    Raises the original exception after rolling back.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


@contextmanager
def transaction(db: Session, operation: str = "transaction") -> Generator[Session, None, None]:
    """
    Unit of work around a block of reads and writes.

    Commits when the block finishes, rolls back on any exception.
    Storage faults (conflicts, timeouts, lost connections) are re-raised
    as DatabaseError so callers see one internal failure kind.

    Usage:
        with transaction(db, "pay order"):
            order = repo.find_by_id(order_id, for_update=True)
            ...
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Transaction rolled back", operation=operation, error=str(e))
        raise DatabaseError(operation) from e
    except Exception:
        db.rollback()
        raise
