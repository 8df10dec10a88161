"""
Authentication utilities.

Tokens are issued by the identity service; this module verifies them and
turns the claims into an Identity. sign_jwt exists for local tooling and
tests that need a valid token.
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import jwt
from fastapi import Header, HTTPException, status

from shared.config.constants import Roles
from shared.config.settings import (
    JWT_SECRET,
    JWT_ISSUER,
    JWT_AUDIENCE,
    settings,
)
from shared.config.logging import auth_logger as logger, mask_user_id
from shared.security.identity import Identity


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(
    payload: dict[str, Any],
    ttl_seconds: int | None = None,
    token_type: str = "access",
) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, role, region, ...)
        ttl_seconds: Token lifetime in seconds. Defaults to access token expiry.
        token_type: Type of token.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "type": token_type,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Args:
        token: The JWT token string.

    Returns:
        Decoded token claims.

    Raises:
        HTTPException: If token is invalid, expired, or lacks required claims.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        # Log the actual error, return a generic message to the client
        logger.warning("JWT validation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    if payload.get("type") not in ("access", None):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: invalid type claim",
        )

    for claim in ("sub", "role", "region"):
        value = payload.get(claim)
        if value is None or str(value).strip() == "":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=f"Invalid token: missing {claim} claim",
            )

    if payload["role"] not in Roles.ALL:
        logger.warning(
            "Token with unknown role",
            user_id=mask_user_id(payload["sub"]),
            role=payload["role"],
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: malformed role claim",
        )

    return payload


def identity_from_claims(claims: dict[str, Any]) -> Identity:
    """Build an Identity from verified token claims."""
    return Identity(
        id=str(claims["sub"]),
        role=claims["role"],
        region=str(claims["region"]),
    )


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        HTTPException: If header is missing or malformed.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Authorization header",
        )
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format. Expected: Bearer <token>",
        )
    return authorization.split(" ", 1)[1].strip()


def current_identity(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> Identity:
    """
    FastAPI dependency to get the caller's Identity from the bearer token.

    Usage:
        @router.get("/orders")
        def list_orders(identity: Identity = Depends(current_identity)):
            ...
    """
    token = get_bearer_token(authorization)
    return identity_from_claims(verify_jwt(token))
