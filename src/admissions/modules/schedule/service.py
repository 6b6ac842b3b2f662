"""
Schedule Service
"""

import logging
from datetime import date, timedelta
from itertools import groupby

from sqlalchemy.ext.asyncio import AsyncSession

from . import repository
from .schemas import CalendarDay, EventResponse, EventWrite

logger = logging.getLogger(__name__)

UPCOMING_DAYS = 7
UPCOMING_LIMIT = 10


class ScheduleServiceError(Exception):
    """Base exception for schedule service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class EventNotFoundError(ScheduleServiceError):
    def __init__(self, event_id: int):
        self.event_id = event_id
        super().__init__(
            message="Event not found",
            error_code="EVENT_NOT_FOUND",
            status_code=404,
        )


class InvalidMonthError(ScheduleServiceError):
    def __init__(self, year: int, month: int):
        super().__init__(
            message=f"Invalid calendar month: {year}-{month}",
            error_code="INVALID_MONTH",
            status_code=400,
        )


async def list_events(
    db: AsyncSession,
    *,
    on_date: date | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    program_id: str | None = None,
    event_type: str | None = None,
) -> list[EventResponse]:
    events = await repository.list_events(
        db,
        on_date=on_date,
        start_date=start_date,
        end_date=end_date,
        program_id=program_id,
        event_type=event_type,
    )
    return [EventResponse.model_validate(e) for e in events]


async def get_event(db: AsyncSession, event_id: int) -> EventResponse:
    event = await repository.get_by_id(db, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return EventResponse.model_validate(event)


async def create_event(db: AsyncSession, data: EventWrite) -> EventResponse:
    event = await repository.create(db, data.column_values())
    logger.info(f"Created schedule event {event.id} on {event.date}")
    return EventResponse.model_validate(event)


async def update_event(db: AsyncSession, event_id: int, data: EventWrite) -> None:
    if not await repository.update_event(db, event_id, data.column_values()):
        raise EventNotFoundError(event_id)
    logger.info(f"Updated schedule event {event_id}")


async def delete_event(db: AsyncSession, event_id: int) -> None:
    if not await repository.delete_event(db, event_id):
        raise EventNotFoundError(event_id)
    logger.info(f"Deleted schedule event {event_id}")


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month."""
    try:
        start = date(year, month, 1)
    except ValueError as e:
        raise InvalidMonthError(year, month) from e
    if month == 12:
        return start, date(year + 1, 1, 1)
    return start, date(year, month + 1, 1)


async def get_calendar(db: AsyncSession, year: int, month: int) -> list[CalendarDay]:
    """
    One entry per day of the month that has events, in date order.

    ``event_titles`` joins the day's titles with ", " in time order.
    """
    start, end = month_bounds(year, month)
    rows = await repository.list_between(db, start, end)

    days = []
    for event_date, group in groupby(rows, key=lambda row: row[0]):
        titles = [title for _, title in group]
        days.append(
            CalendarDay(
                event_date=event_date,
                event_count=len(titles),
                event_titles=", ".join(titles),
            )
        )
    return days


async def get_upcoming_week(db: AsyncSession, today: date | None = None) -> list[EventResponse]:
    """Events from today through the next seven days, at most ten."""
    today = today or date.today()
    events = await repository.list_events(
        db,
        start_date=today,
        end_date=today + timedelta(days=UPCOMING_DAYS),
        limit=UPCOMING_LIMIT,
    )
    return [EventResponse.model_validate(e) for e in events]
