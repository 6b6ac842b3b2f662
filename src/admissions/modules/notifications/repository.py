"""
Notifications Repository

Statements feeding the notification panels. Every statement goes through the
safe query executor: the program and calendar tables are owned by other
systems and any of them may be missing in a given deployment.
"""

from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import Date, DateTime, bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.modules.dashboard.introspection import (
    best_timestamp_column,
    ensure_identifier,
    first_existing_column,
)
from admissions.modules.dashboard.programs import ProgramConfig
from admissions.modules.dashboard.safe_query import Row, safe_query


@dataclass(frozen=True)
class CalendarSource:
    """One date column of a calendar table shown as an important date."""

    table: str
    column: str
    event_type: str
    program: str
    category: str
    icon: str
    color: str
    include_program_in_title: bool = True


CALENDAR_SOURCES: tuple[CalendarSource, ...] = (
    CalendarSource("iim_pgpmci_calendar", "announcement_offer_date", "Announcement Offer Date", "PGP", "announcement", "calendar", "#8e2a6b"),
    CalendarSource("iim_pgpmci_calendar", "commitment_fee_date_offered", "Commitment Fee Deadline", "PGP", "fee", "card", "#8e2a6b"),
    CalendarSource("iim_pgpmci_calendar", "term_fee_date", "Term Fee Deadline", "PGP", "fee", "card", "#8e2a6b"),
    CalendarSource("iim_phd_calendar", "announcement_offer_date", "Announcement Offer Date", "PhD", "announcement", "school", "#2196F3"),
    CalendarSource("iim_phd_calendar", "commitment_fee_last_date", "Commitment Fee Deadline", "PhD", "fee", "card", "#2196F3"),
    CalendarSource("iim_interview_calendar", "announcement_offer_date", "Interview Announcement", "Interview", "interview", "people", "#FF9800", False),
    CalendarSource("iim_interview_calendar", "announcement_offer_last_date", "Interview Response Deadline", "Interview", "deadline", "people", "#FF9800", False),
)

CALENDAR_ENTRIES_PER_SOURCE = 2
UPCOMING_SLOT_DAYS_LIMIT = 2


async def get_recent_applications(
    db: AsyncSession, config: ProgramConfig, since: datetime
) -> list[Row]:
    """Newest applications of a program created after ``since``."""
    table = config.application_table
    # Either a known column name or CURRENT_TIMESTAMP
    column = await best_timestamp_column(db, table)

    statement = text(
        f"SELECT {column} AS activity_time FROM {table} "
        f"WHERE {column} >= :since ORDER BY {column} DESC LIMIT :limit"
    ).bindparams(bindparam("since", type_=DateTime()))

    return await safe_query(
        db,
        statement,
        {"since": since, "limit": config.recent_activity_limit},
        context=f"{config.label} activities query",
    )


async def _get_daily_batches(
    db: AsyncSession, table: str, column: str, since: datetime, context: str
) -> list[Row]:
    statement = text(
        f"SELECT MAX({column}) AS activity_time, COUNT(*) AS count FROM {table} "
        f"WHERE {column} >= :since GROUP BY DATE({column}) "
        f"ORDER BY MAX({column}) DESC LIMIT 2"
    ).bindparams(bindparam("since", type_=DateTime()))

    return await safe_query(db, statement, {"since": since}, context=context)


async def get_verification_batches(db: AsyncSession, since: datetime) -> list[Row]:
    """PGP document verifications grouped per day."""
    return await _get_daily_batches(
        db, "iim_pgpmci_verification", "created_at", since, "Verification activities query"
    )


async def get_slot_booking_batches(db: AsyncSession, since: datetime) -> list[Row]:
    """PGP interview slot bookings grouped per day."""
    return await _get_daily_batches(
        db, "iim_pgpmci_slot_student", "added_at", since, "Slot activities query"
    )


async def get_calendar_dates(db: AsyncSession, source: CalendarSource, since: date) -> list[Row]:
    """Most recent dates of one calendar column on or after ``since``."""
    column = ensure_identifier(source.column)
    statement = text(
        f"SELECT {column} AS event_date, announcement_no FROM {ensure_identifier(source.table)} "
        f"WHERE {column} >= :since ORDER BY {column} DESC LIMIT :limit"
    ).bindparams(bindparam("since", type_=Date()))

    return await safe_query(
        db,
        statement,
        {"since": since, "limit": CALENDAR_ENTRIES_PER_SOURCE},
        context=f"{source.program} calendar query ({source.column})",
    )


async def get_upcoming_slot_days(db: AsyncSession, start: date, end: date) -> list[Row]:
    """PGP slot days between ``start`` and ``end`` with their slot counts."""
    column = await first_existing_column(db, "iim_pgpmci_slot", ("slot_date", "date"), "slot_date")

    statement = text(
        f"SELECT {column} AS event_date, COUNT(*) AS slot_count FROM iim_pgpmci_slot "
        f"WHERE {column} >= :start AND {column} <= :end "
        f"GROUP BY {column} ORDER BY {column} ASC LIMIT :limit"
    ).bindparams(bindparam("start", type_=Date()), bindparam("end", type_=Date()))

    return await safe_query(
        db,
        statement,
        {"start": start, "end": end, "limit": UPCOMING_SLOT_DAYS_LIMIT},
        context="Upcoming slots query",
    )
