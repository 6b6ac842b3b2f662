"""
Authentication Service

Business logic for registration, login and the OTP password reset flow.

Security:
- Passwords are hashed with bcrypt
- Session rows and reset codes store SHA-256 digests, never the raw values
- Reset codes are bound to the requesting user and expire after
  ``settings.password_reset_otp_minutes``
- A successful reset consumes every outstanding code of that user
"""

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.config import settings
from admissions.core.email import send_password_reset_otp
from admissions.core.security import create_access_token, hash_password, verify_password
from admissions.modules.auth.schemas import RegisterRequest
from admissions.modules.users.models import User
from admissions.modules.users.repository import UserRepository, utcnow

logger = logging.getLogger(__name__)

OTP_DIGITS = 6


def _hash_token(token: str) -> str:
    """Hex-encoded SHA-256 of a token or code, for storage."""
    return hashlib.sha256(token.encode()).hexdigest()


def generate_otp() -> str:
    """Random 6-digit code (100000-999999)."""
    return str(secrets.randbelow(9 * 10 ** (OTP_DIGITS - 1)) + 10 ** (OTP_DIGITS - 1))


# ============================================
# Exceptions
# ============================================


class AuthServiceError(Exception):
    """Base exception for authentication service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class EmailAlreadyRegisteredError(AuthServiceError):
    def __init__(self):
        super().__init__(
            message="User already exists",
            error_code="USER_EXISTS",
            status_code=400,
        )


class InvalidCredentialsError(AuthServiceError):
    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            error_code="INVALID_CREDENTIALS",
            status_code=401,
        )


class UserNotFoundError(AuthServiceError):
    def __init__(self):
        super().__init__(
            message="User not found",
            error_code="USER_NOT_FOUND",
            status_code=404,
        )


class InvalidOtpError(AuthServiceError):
    def __init__(self):
        super().__init__(
            message="Invalid or expired OTP",
            error_code="INVALID_OTP",
            status_code=400,
        )


class EmailDeliveryError(AuthServiceError):
    def __init__(self):
        super().__init__(
            message="Failed to process request",
            error_code="EMAIL_DELIVERY_FAILED",
            status_code=500,
        )


# ============================================
# Operations
# ============================================


@dataclass
class LoginResult:
    token: str
    expires_at: datetime
    user: User


async def register_user(db: AsyncSession, data: RegisterRequest) -> User:
    """
    Create a staff account.

    Raises:
        EmailAlreadyRegisteredError: If the email is already in use
    """
    if await UserRepository.email_exists(db, data.email):
        logger.info(f"Registration rejected, email already registered: {data.email}")
        raise EmailAlreadyRegisteredError()

    user = await UserRepository.create(
        db,
        email=data.email,
        password_hash=hash_password(data.password),
        username=data.username,
    )
    await db.commit()
    return user


async def login(db: AsyncSession, email: str, password: str) -> LoginResult:
    """
    Verify credentials, issue an access token and record the session.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
    """
    user = await UserRepository.get_by_email(db, email)

    if user is None:
        logger.warning(f"Login attempt for non-existent email: {email}")
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Invalid password for user: {email}")
        raise InvalidCredentialsError()

    lifetime = timedelta(minutes=settings.access_token_expire_minutes)
    token = create_access_token(
        subject=str(user.id),
        additional_claims={"email": user.email, "username": user.username},
        expires_delta=lifetime,
    )
    expires_at = utcnow() + lifetime

    await UserRepository.create_session(db, user.id, _hash_token(token), expires_at)
    await db.commit()

    logger.info(f"User logged in: {user.email}")
    return LoginResult(token=token, expires_at=expires_at, user=user)


async def request_password_reset(db: AsyncSession, email: str) -> None:
    """
    Issue a reset code for ``email`` and send it by email.

    Raises:
        UserNotFoundError: If no account uses this email
        EmailDeliveryError: If the code could not be sent
    """
    user = await UserRepository.get_by_email(db, email)
    if user is None:
        logger.info(f"Password reset requested for unknown email: {email}")
        raise UserNotFoundError()

    otp = generate_otp()
    expires_at = utcnow() + timedelta(minutes=settings.password_reset_otp_minutes)

    await UserRepository.create_password_reset(db, user.id, _hash_token(otp), expires_at)
    await db.commit()

    sent = await send_password_reset_otp(email, otp, settings.password_reset_otp_minutes)
    if not sent:
        raise EmailDeliveryError()

    logger.info(f"Password reset code issued for user {user.id}")


async def reset_password(db: AsyncSession, email: str, otp: str, new_password: str) -> None:
    """
    Replace the password of ``email`` if ``otp`` is a live code issued to that user.

    Raises:
        UserNotFoundError: If no account uses this email
        InvalidOtpError: If the code is wrong, expired or belongs to another user
    """
    user = await UserRepository.get_by_email(db, email)
    if user is None:
        raise UserNotFoundError()

    reset = await UserRepository.find_valid_password_reset(db, user.id, _hash_token(otp), utcnow())
    if reset is None:
        logger.warning(f"Invalid password reset code for user {user.id}")
        raise InvalidOtpError()

    await UserRepository.update_password(db, user.id, hash_password(new_password))
    await UserRepository.delete_password_resets_for_user(db, user.id)
    await db.commit()

    logger.info(f"Password reset completed for user {user.id}")


async def purge_expired_credentials(db: AsyncSession) -> dict[str, int]:
    """Delete expired sessions and reset codes. Returns the counts removed."""
    now = utcnow()
    sessions = await UserRepository.delete_expired_sessions(db, now)
    resets = await UserRepository.delete_expired_password_resets(db, now)
    await db.commit()
    return {"sessions": sessions, "password_resets": resets}
