"""
Applicants Repository

Database operations for applicants. An applicant is addressed by an
identifier that is either the numeric primary key or the ``applicant_id``
string.
"""

from sqlalchemy import ColumnElement, case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Applicant, ApplicationStatus

STATS_PROGRAMS = ("PGP", "PhD", "EPhD", "EMBA")


def is_numeric_identifier(identifier: str) -> bool:
    return identifier.isascii() and identifier.isdigit()


def _identifier_clause(identifier: str) -> ColumnElement[bool]:
    if is_numeric_identifier(identifier):
        return Applicant.id == int(identifier)
    return Applicant.applicant_id == identifier


async def list_applicants(db: AsyncSession, skip: int, limit: int) -> tuple[list[Applicant], int]:
    """Page of applicants, newest first, and the total count."""
    total = await db.scalar(select(func.count()).select_from(Applicant))

    result = await db.execute(
        select(Applicant)
        .order_by(Applicant.created_at.desc(), Applicant.id.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def get_by_identifier(db: AsyncSession, identifier: str) -> Applicant | None:
    result = await db.execute(select(Applicant).where(_identifier_clause(identifier)))
    return result.scalar_one_or_none()


async def _set_flag(db: AsyncSession, identifier: str, **values: bool) -> bool:
    result = await db.execute(
        update(Applicant)
        .where(_identifier_clause(identifier))
        .values(**values, updated_at=func.now())
    )
    await db.commit()
    return (result.rowcount or 0) > 0


async def set_offer_issued(db: AsyncSession, identifier: str, offer_issued: bool) -> bool:
    """Set the offer flag. Returns False if no applicant matched."""
    return await _set_flag(db, identifier, offer_issued=offer_issued)


async def set_fee_paid(db: AsyncSession, identifier: str, fee_paid: bool) -> bool:
    """Set the fee flag. Returns False if no applicant matched."""
    return await _set_flag(db, identifier, fee_paid=fee_paid)


async def get_stats(db: AsyncSession) -> dict[str, int | None]:
    """Status, offer, fee and per-program counts in one statement."""

    def count_when(condition: ColumnElement[bool], label: str):
        return func.count(case((condition, 1))).label(label)

    columns = [
        func.count().label("total_applicants"),
        count_when(Applicant.application_status == ApplicationStatus.ADMITTED.value, "admitted"),
        count_when(
            Applicant.application_status == ApplicationStatus.UNDER_REVIEW.value, "under_review"
        ),
        count_when(Applicant.application_status == ApplicationStatus.REJECTED.value, "rejected"),
        count_when(Applicant.offer_issued.is_(True), "offers_issued"),
        count_when(Applicant.fee_paid.is_(True), "fees_paid"),
    ]
    columns.extend(
        count_when(Applicant.program_applied_for == program, f"{program.lower()}_applicants")
        for program in STATS_PROGRAMS
    )

    result = await db.execute(select(*columns))
    return dict(result.mappings().one())
