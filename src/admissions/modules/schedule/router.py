"""
Schedule Router

Endpoints:
- GET /schedule - List events (filters: date, start_date + end_date, program_id, event_type)
- POST /schedule - Create event
- GET /schedule/calendar/{year}/{month} - Per-day event counts for a month
- GET /schedule/upcoming/week - Events in the next seven days
- GET /schedule/{event_id} - Get event
- PUT /schedule/{event_id} - Replace event
- DELETE /schedule/{event_id} - Delete event
"""

import logging
from datetime import date
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.auth import CurrentUser, get_current_user
from admissions.core.database import get_db
from admissions.core.responses import ApiResponse

from . import service
from .schemas import CalendarDay, EventResponse, EventWrite
from .service import ScheduleServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: ScheduleServiceError) -> NoReturn:
    raise HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


def _internal_error(message: str, e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": str(e), "message": message},
    )


# ============================================
# Collection
# ============================================


@router.get(
    "",
    response_model=ApiResponse[list[EventResponse]],
    summary="List Events",
)
async def list_events(
    date_: date | None = Query(None, alias="date", description="Events on this day"),
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
    program_id: str = Query("all"),
    event_type: str = Query("all"),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """Events ordered by date and time. `start_date` and `end_date` filter only together."""
    try:
        events = await service.list_events(
            db,
            on_date=date_,
            start_date=start_date,
            end_date=end_date,
            program_id=program_id,
            event_type=event_type,
        )
    except Exception as e:
        logger.exception(f"Error fetching events: {e}")
        raise _internal_error("Error fetching events", e) from e

    return ApiResponse(data=events)


@router.post(
    "",
    response_model=ApiResponse[EventResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create Event",
)
async def create_event(
    body: EventWrite,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        event = await service.create_event(db, body)
    except Exception as e:
        logger.exception(f"Error creating event: {e}")
        raise _internal_error("Error creating event", e) from e

    return ApiResponse(data=event, message="Event created successfully")


# ============================================
# Views
# ============================================


@router.get(
    "/calendar/{year}/{month}",
    response_model=ApiResponse[list[CalendarDay]],
    summary="Calendar Month",
)
async def get_calendar(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        days = await service.get_calendar(db, year, month)
    except ScheduleServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error fetching calendar events: {e}")
        raise _internal_error("Error fetching calendar events", e) from e

    return ApiResponse(data=days)


@router.get(
    "/upcoming/week",
    response_model=ApiResponse[list[EventResponse]],
    summary="Upcoming Events",
)
async def get_upcoming_events(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        events = await service.get_upcoming_week(db)
    except Exception as e:
        logger.exception(f"Error fetching upcoming events: {e}")
        raise _internal_error("Error fetching upcoming events", e) from e

    return ApiResponse(data=events)


# ============================================
# Single Event
# ============================================


@router.get(
    "/{event_id}",
    response_model=ApiResponse[EventResponse],
    summary="Get Event",
    responses={404: {"description": "Event not found"}},
)
async def get_event(
    event_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        event = await service.get_event(db, event_id)
    except ScheduleServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error fetching event {event_id}: {e}")
        raise _internal_error("Error fetching event", e) from e

    return ApiResponse(data=event)


@router.put(
    "/{event_id}",
    response_model=ApiResponse[None],
    summary="Update Event",
    responses={404: {"description": "Event not found"}},
)
async def update_event(
    event_id: int,
    body: EventWrite,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        await service.update_event(db, event_id, body)
    except ScheduleServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating event {event_id}: {e}")
        raise _internal_error("Error updating event", e) from e

    return ApiResponse(message="Event updated successfully")


@router.delete(
    "/{event_id}",
    response_model=ApiResponse[None],
    summary="Delete Event",
    responses={404: {"description": "Event not found"}},
)
async def delete_event(
    event_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        await service.delete_event(db, event_id)
    except ScheduleServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error deleting event {event_id}: {e}")
        raise _internal_error("Error deleting event", e) from e

    return ApiResponse(message="Event deleted successfully")
