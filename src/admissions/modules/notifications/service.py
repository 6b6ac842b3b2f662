"""
Notifications Service

Builds the two notification panels of the admin app:

- recent activities: new applications, document verification batches and
  interview slot bookings, newest first
- important dates: admission calendar deadlines and upcoming interview slot
  days, soonest first

Each source degrades on its own; an empty panel is returned as ``[]``.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from admissions.modules.dashboard.programs import PROGRAMS

from . import repository

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5
IMPORTANT_DATES_LIMIT = 8

APPLICATION_WINDOW = timedelta(days=7)
BATCH_WINDOW = timedelta(days=1)
CALENDAR_LOOKBACK = timedelta(days=180)
UPCOMING_SLOT_WINDOW = timedelta(days=30)


# ============================================
# Formatting Helpers
# ============================================


def as_datetime(value: Any) -> datetime | None:
    """Coerce a driver value (datetime, date or ISO string) to a datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def time_ago(moment: datetime, now: datetime | None = None) -> str:
    """Human readable age: "2 days ago", "1 hour ago", "5 minutes ago"."""
    if now is None:
        now = datetime.now(moment.tzinfo)
    elapsed = now - moment

    hours = int(elapsed.total_seconds() // 3600)
    days = hours // 24

    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"

    minutes = max(1, int(elapsed.total_seconds() // 60))
    return f"{minutes} minute{'s' if minutes > 1 else ''} ago"


def format_date(value: date) -> str:
    """Long US style date, e.g. "March 15, 2025"."""
    return f"{value:%B} {value.day}, {value.year}"


# ============================================
# Recent Activities
# ============================================


async def get_recent_activities(db: AsyncSession, now: datetime | None = None) -> list[dict]:
    """Merge the activity sources and return the newest few with their age."""
    now = now or datetime.now()
    activities: list[dict[str, Any]] = []

    for config in PROGRAMS.values():
        if config.recent_activity_limit <= 0:
            continue
        rows = await repository.get_recent_applications(db, config, now - APPLICATION_WINDOW)
        activities.extend(
            {
                "title": "New Application Received",
                "description": f"{config.label} - New Application",
                "program": config.label,
                "category": "application",
                "icon": "checkmark-circle",
                "color": "#4CAF50",
                "time": row.get("activity_time"),
            }
            for row in rows
        )

    for row in await repository.get_verification_batches(db, now - BATCH_WINDOW):
        activities.append(
            {
                "title": "Document Verification",
                "description": f"PGP - {row.get('count', 0)} Applications",
                "program": "PGP",
                "category": "verification",
                "icon": "document-text",
                "color": "#2196F3",
                "time": row.get("activity_time"),
            }
        )

    for row in await repository.get_slot_booking_batches(db, now - BATCH_WINDOW):
        activities.append(
            {
                "title": "Interview Slots Booked",
                "description": f"PGP - {row.get('count', 0)} Students",
                "program": "PGP",
                "category": "slot",
                "icon": "calendar",
                "color": "#FF9800",
                "time": row.get("activity_time"),
            }
        )

    dated = []
    for activity in activities:
        moment = as_datetime(activity["time"])
        if moment is None:
            continue
        activity["time"] = moment.isoformat()
        activity["timeAgo"] = time_ago(moment, now if moment.tzinfo is None else None)
        dated.append((moment, activity))

    dated.sort(key=lambda item: item[0], reverse=True)
    logger.debug(f"Collected {len(dated)} recent activities")
    return [activity for _, activity in dated[:RECENT_ACTIVITY_LIMIT]]


# ============================================
# Important Dates
# ============================================


async def get_important_dates(db: AsyncSession, today: date | None = None) -> list[dict]:
    """Calendar dates from the last 180 days and upcoming slot days, soonest first."""
    today = today or date.today()
    events: list[tuple[date, dict[str, Any]]] = []

    for source in repository.CALENDAR_SOURCES:
        rows = await repository.get_calendar_dates(db, source, today - CALENDAR_LOOKBACK)
        for row in rows:
            moment = as_datetime(row.get("event_date"))
            if moment is None:
                continue
            title = (
                f"{source.event_type} - {source.program}"
                if source.include_program_in_title
                else source.event_type
            )
            events.append(
                (
                    moment.date(),
                    {
                        "title": title,
                        "description": f"Announcement #{row.get('announcement_no')}",
                        "icon": source.icon,
                        "color": source.color,
                        "category": source.category,
                    },
                )
            )

    slot_rows = await repository.get_upcoming_slot_days(db, today, today + UPCOMING_SLOT_WINDOW)
    for row in slot_rows:
        moment = as_datetime(row.get("event_date"))
        if moment is None:
            continue
        events.append(
            (
                moment.date(),
                {
                    "title": "Interview Slots - PGP",
                    "description": f"{row.get('slot_count', 0)} slots available",
                    "icon": "calendar",
                    "color": "#4CAF50",
                    "category": "slot",
                },
            )
        )

    events.sort(key=lambda item: item[0])

    return [
        {**event, "date": event_date.isoformat(), "formattedDate": format_date(event_date)}
        for event_date, event in events[:IMPORTANT_DATES_LIMIT]
    ]
