"""
Shared model bases.

Every table owned by this API has an auto-increment integer primary key and a
``created_at`` timestamp; mutable records also carry ``updated_at``.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from admissions.core.database import Base


class BaseModel(Base):
    """Abstract base: integer id plus creation time."""

    __abstract__ = True
    # Load server-generated timestamps at flush; async sessions cannot lazy load them
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )


class TimestampMixin:
    """Adds ``updated_at``, refreshed on every ORM update."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
