"""
User Models

Admissions staff accounts, their login sessions and password reset codes.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from admissions.modules.shared import BaseModel


class User(BaseModel):
    """
    Staff account used to sign in to the admissions admin app.

    The bcrypt hash is stored in the ``password`` column.
    """

    __tablename__ = "users"

    username: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column("password", String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


class UserSession(BaseModel):
    """
    A login session. ``token`` holds the SHA-256 of the issued access token,
    never the token itself.
    """

    __tablename__ = "user_sessions"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class PasswordReset(BaseModel):
    """A one-time password reset code (stored as its SHA-256) bound to one user."""

    __tablename__ = "password_resets"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token: Mapped[str] = mapped_column(String(255), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
