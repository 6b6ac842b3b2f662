"""
Applicant Models
"""

import enum
from datetime import date

from sqlalchemy import Boolean, Date, String
from sqlalchemy.orm import Mapped, mapped_column

from admissions.modules.shared import BaseModel, TimestampMixin


class ApplicationStatus(str, enum.Enum):
    """Decision state of an applicant."""

    UNDER_REVIEW = "under_review"
    ADMITTED = "admitted"
    REJECTED = "rejected"


class Applicant(TimestampMixin, BaseModel):
    """
    A person who applied to one of the programs.

    Addressed either by the numeric ``id`` or by the public ``applicant_id``
    string (e.g. "APP2025001").
    """

    __tablename__ = "applicants"

    applicant_id: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    program_applied_for: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    application_status: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        default=ApplicationStatus.UNDER_REVIEW.value,
        index=True,
    )
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    source: Mapped[str | None] = mapped_column(String(100), nullable=True)
    offer_issued: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    fee_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    applied_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    def __repr__(self) -> str:
        return f"<Applicant(id={self.id}, applicant_id={self.applicant_id})>"
