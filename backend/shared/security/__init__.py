"""
Security module: Identity, token verification, rate limiting.
"""

from shared.security.identity import Identity
from shared.security.auth import (
    sign_jwt,
    verify_jwt,
    get_bearer_token,
    identity_from_claims,
    current_identity,
)
from shared.security.rate_limit import (
    limiter,
    rate_limit_exceeded_handler,
)

__all__ = [
    # identity
    "Identity",
    # auth
    "sign_jwt",
    "verify_jwt",
    "get_bearer_token",
    "identity_from_claims",
    "current_identity",
    # rate limiting
    "limiter",
    "rate_limit_exceeded_handler",
]
