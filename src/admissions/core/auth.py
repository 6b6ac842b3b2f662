"""
Authentication Module

Provides the bearer-token dependency for FastAPI endpoints.
Every route outside of /register, /login, /forgot-password and
/reset-password depends on ``get_current_user``.

SECURITY NOTE:
- Development mode test tokens are ONLY accepted when PYTHON_ENV=development
- Production environments MUST set PYTHON_ENV=production to disable them
"""

import logging
import os
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from admissions.core.config import settings
from admissions.core.security import decode_token

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """
    An authenticated admissions staff user, populated from JWT claims.

    Attributes:
        id: User's numeric id (``users.id``)
        email: User's email address
        username: Display name, when present in the token
    """

    id: int
    email: str
    username: str | None = None

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, email={self.email})"


def _is_dev_mode_safe() -> bool:
    """
    Check if development test tokens may be accepted.

    Requires settings.is_development, not settings.is_production, and a
    PYTHON_ENV environment variable that is neither production nor staging.
    """
    env_var = os.getenv("PYTHON_ENV", "").lower()

    is_safe = (
        settings.is_development
        and not settings.is_production
        and env_var not in ("production", "staging")
    )

    if is_safe:
        logger.warning(
            "SECURITY: Development auth mode is ENABLED. This MUST NOT be used in production!"
        )

    return is_safe


_DEVELOPMENT_MODE = _is_dev_mode_safe()

_DEV_USER = CurrentUser(id=1, email="admin@admissions.dev", username="Development Admin")


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def validate_access_token(token: str) -> CurrentUser:
    """
    Validate a JWT and extract the user claims.

    Args:
        token: JWT string from the Authorization header

    Returns:
        CurrentUser built from the ``sub``, ``email`` and ``username`` claims

    Raises:
        HTTPException 401: If the token is invalid, expired, not an access
            token, or carries malformed claims
    """
    if _DEVELOPMENT_MODE and token in ("dev-token", "test-token"):
        logger.debug("Development mode: Using test token")
        return _DEV_USER

    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired token")

    token_type = payload.get("type", "access")
    if token_type != "access":
        logger.warning(f"Invalid token type: {token_type}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        subject = payload.get("sub")
        if not subject:
            raise ValueError("Missing 'sub' claim in token")

        return CurrentUser(
            id=int(subject),
            email=payload.get("email", ""),
            username=payload.get("username"),
        )
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser:
    """
    FastAPI dependency that validates the bearer token.

    Usage:
        @router.get("/dashboard/overview")
        async def overview(user: CurrentUser = Depends(get_current_user)):
            ...

    Raises:
        HTTPException 401: If the token is missing, invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("MISSING_TOKEN", "Access token required")

    user = validate_access_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id} ({user.email})")
    return user


__all__ = [
    "CurrentUser",
    "get_current_user",
    "validate_access_token",
]
