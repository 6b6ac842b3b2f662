"""
Schedule Repository
"""

from datetime import date

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import ALL_PROGRAMS, ScheduleEvent


async def list_events(
    db: AsyncSession,
    *,
    on_date: date | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    program_id: str | None = None,
    event_type: str | None = None,
    limit: int | None = None,
) -> list[ScheduleEvent]:
    """
    Events ordered by date then time.

    The range filter applies only when both ends are given (inclusive).
    ``program_id`` and ``event_type`` of ``"all"`` do not filter.
    """
    query = select(ScheduleEvent)

    if on_date is not None:
        query = query.where(ScheduleEvent.date == on_date)
    if start_date is not None and end_date is not None:
        query = query.where(ScheduleEvent.date.between(start_date, end_date))
    if program_id and program_id != ALL_PROGRAMS:
        query = query.where(ScheduleEvent.program_id == program_id)
    if event_type and event_type != ALL_PROGRAMS:
        query = query.where(ScheduleEvent.event_type == event_type)

    query = query.order_by(ScheduleEvent.date.asc(), ScheduleEvent.time.asc(), ScheduleEvent.id.asc())
    if limit is not None:
        query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())


async def get_by_id(db: AsyncSession, event_id: int) -> ScheduleEvent | None:
    return await db.get(ScheduleEvent, event_id)


async def create(db: AsyncSession, values: dict) -> ScheduleEvent:
    event = ScheduleEvent(**values)
    db.add(event)
    await db.commit()
    await db.refresh(event)
    return event


async def update_event(db: AsyncSession, event_id: int, values: dict) -> bool:
    """Replace an event's fields. Returns False if it does not exist."""
    result = await db.execute(
        update(ScheduleEvent)
        .where(ScheduleEvent.id == event_id)
        .values(**values, updated_at=func.now())
    )
    await db.commit()
    return (result.rowcount or 0) > 0


async def delete_event(db: AsyncSession, event_id: int) -> bool:
    result = await db.execute(delete(ScheduleEvent).where(ScheduleEvent.id == event_id))
    await db.commit()
    return (result.rowcount or 0) > 0


async def list_between(db: AsyncSession, start: date, end_exclusive: date) -> list[tuple[date, str]]:
    """(date, title) pairs in ``[start, end_exclusive)``, ordered by date."""
    result = await db.execute(
        select(ScheduleEvent.date, ScheduleEvent.event_title)
        .where(ScheduleEvent.date >= start, ScheduleEvent.date < end_exclusive)
        .order_by(ScheduleEvent.date.asc(), ScheduleEvent.time.asc(), ScheduleEvent.id.asc())
    )
    return [(row.date, row.event_title) for row in result]
