"""
Utilities module: Exceptions, schemas.
"""

from shared.utils.exceptions import (
    ErrorKind,
    NotFoundError,
    ForbiddenError,
    ValidationError,
    InternalError,
)
from shared.utils.schemas import ErrorResponse

__all__ = [
    # exceptions
    "ErrorKind",
    "NotFoundError",
    "ForbiddenError",
    "ValidationError",
    "InternalError",
    # schemas
    "ErrorResponse",
]
