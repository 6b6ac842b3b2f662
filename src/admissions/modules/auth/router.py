"""
Authentication Router

Endpoints (mounted at the API root):
- POST /register - Create a staff account
- POST /login - Exchange credentials for an access token
- POST /forgot-password - Email a one-time reset code
- POST /reset-password - Set a new password using the code

These are the only endpoints that do not require a bearer token.
"""

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.config import settings
from admissions.core.database import get_db
from admissions.core.rate_limit import RateLimitExceeded, check_rate_limit, rate_limit
from admissions.core.responses import ApiResponse
from admissions.modules.auth import service
from admissions.modules.auth.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UserResponse,
)
from admissions.modules.auth.service import AuthServiceError

logger = logging.getLogger(__name__)

router = APIRouter()

# (limit, window seconds)
RATE_LIMIT_LOGIN = (10, 60)
RATE_LIMIT_FORGOT_PASSWORD_WINDOW = 60 * 60


def _handle_service_error(e: AuthServiceError) -> NoReturn:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


def _internal_error(message: str, e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": str(e), "message": message},
    )


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    responses={400: {"description": "Email already registered or invalid input"}},
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    try:
        user = await service.register_user(db, data)
    except AuthServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Registration error: {e}")
        raise _internal_error("Registration failed", e) from e

    return ApiResponse(
        message="User registered successfully",
        data=UserResponse.model_validate(user),
    )


@router.post(
    "/login",
    response_model=ApiResponse[LoginResponse],
    summary="Login",
    responses={401: {"description": "Invalid credentials"}, 429: {"description": "Too many attempts"}},
)
@rate_limit(limit=RATE_LIMIT_LOGIN[0], window_seconds=RATE_LIMIT_LOGIN[1])
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    """
    Authenticate a user and return a 24h access token.

    The session is recorded in ``user_sessions``.
    """
    try:
        result = await service.login(db, credentials.email, credentials.password)
    except AuthServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Login error: {e}")
        raise _internal_error("Login failed", e) from e

    return ApiResponse(
        data=LoginResponse(
            token=result.token,
            expires_at=result.expires_at,
            user=UserResponse.model_validate(result.user),
        )
    )


@router.post(
    "/forgot-password",
    response_model=ApiResponse[None],
    summary="Forgot Password",
    responses={404: {"description": "User not found"}, 429: {"description": "Too many requests"}},
)
async def forgot_password(
    data: ForgotPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    """Send a 6-digit reset code, valid for 10 minutes, to the account's email."""
    key = f"forgot_password:{data.email.lower()}"
    limit = settings.password_reset_rate_limit
    if not await check_rate_limit(key, limit, RATE_LIMIT_FORGOT_PASSWORD_WINDOW):
        logger.warning(f"Password reset rate limit exceeded for {data.email}")
        raise RateLimitExceeded(limit, RATE_LIMIT_FORGOT_PASSWORD_WINDOW)

    try:
        await service.request_password_reset(db, data.email)
    except AuthServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Forgot password error: {e}")
        raise _internal_error("Failed to process request", e) from e

    return ApiResponse(message="OTP sent to your email")


@router.post(
    "/reset-password",
    response_model=ApiResponse[None],
    summary="Reset Password",
    responses={400: {"description": "Invalid or expired OTP"}, 404: {"description": "User not found"}},
)
async def reset_password(
    data: ResetPasswordRequest,
    db: AsyncSession = Depends(get_db),
) -> ApiResponse:
    try:
        await service.reset_password(db, data.email, data.otp, data.new_password)
    except AuthServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Reset password error: {e}")
        raise _internal_error("Error resetting password", e) from e

    return ApiResponse(message="Password reset successful")
