"""
User Repository

Database operations for staff accounts, sessions and password resets.
Timestamps are naive UTC, matching the DATETIME/TIMESTAMP columns.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.modules.users.models import PasswordReset, User, UserSession

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Current UTC time without tzinfo."""
    return datetime.now(UTC).replace(tzinfo=None)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        username: str | None = None,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            email: User's email address (unique)
            password_hash: bcrypt hash of the password
            username: Display name (optional)

        Returns:
            Created User instance
        """
        user = User(email=email, password_hash=password_hash, username=username)

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.email}")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Get a user by email address.

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def update_password(db: AsyncSession, user_id: int, password_hash: str) -> None:
        await db.execute(
            update(User).where(User.id == user_id).values(password_hash=password_hash)
        )

    # ============================================
    # Sessions
    # ============================================

    @staticmethod
    async def create_session(
        db: AsyncSession, user_id: int, token_hash: str, expires_at: datetime
    ) -> UserSession:
        session = UserSession(user_id=user_id, token=token_hash, expires_at=expires_at)
        db.add(session)
        await db.flush()
        return session

    @staticmethod
    async def delete_expired_sessions(db: AsyncSession, now: datetime) -> int:
        """Delete sessions that expired before ``now``. Returns the number removed."""
        result = await db.execute(delete(UserSession).where(UserSession.expires_at < now))
        return result.rowcount or 0

    # ============================================
    # Password Resets
    # ============================================

    @staticmethod
    async def create_password_reset(
        db: AsyncSession, user_id: int, token_hash: str, expires_at: datetime
    ) -> PasswordReset:
        reset = PasswordReset(user_id=user_id, token=token_hash, expires_at=expires_at)
        db.add(reset)
        await db.flush()
        return reset

    @staticmethod
    async def find_valid_password_reset(
        db: AsyncSession, user_id: int, token_hash: str, now: datetime
    ) -> PasswordReset | None:
        """Unexpired reset for this user and code, if any."""
        result = await db.execute(
            select(PasswordReset)
            .where(
                PasswordReset.user_id == user_id,
                PasswordReset.token == token_hash,
                PasswordReset.expires_at > now,
            )
            .order_by(PasswordReset.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def delete_password_resets_for_user(db: AsyncSession, user_id: int) -> None:
        await db.execute(delete(PasswordReset).where(PasswordReset.user_id == user_id))

    @staticmethod
    async def delete_expired_password_resets(db: AsyncSession, now: datetime) -> int:
        result = await db.execute(delete(PasswordReset).where(PasswordReset.expires_at < now))
        return result.rowcount or 0
