"""
Infrastructure module: Database sessions and request correlation.
"""

from shared.infrastructure.db import (
    engine,
    SessionLocal,
    get_db,
    get_db_context,
    safe_commit,
    transaction,
)

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "safe_commit",
    "transaction",
]
