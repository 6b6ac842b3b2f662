"""
Schedule service tests against a SQLite store.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from admissions.modules.schedule.schemas import EventWrite
from admissions.modules.schedule.service import (
    EventNotFoundError,
    InvalidMonthError,
    create_event,
    delete_event,
    get_calendar,
    get_event,
    get_upcoming_week,
    list_events,
    month_bounds,
    update_event,
)


def _event(title: str, day: date, time: str = "10:00", **extra) -> EventWrite:
    return EventWrite(event_title=title, date=day, time=time, **extra)


@pytest.fixture
def seed_events(orm_store):
    async def _seed():
        events = [
            _event("Panel interview", date(2025, 3, 5), "14:00", program_id="pgp", event_type="interview"),
            _event("Faculty meeting", date(2025, 3, 5), "09:00"),
            _event("Fee deadline", date(2025, 3, 20), "17:00", program_id="phd", event_type="deadline"),
            _event("Orientation", date(2025, 4, 1), "11:00", program_id="pgp"),
        ]
        return [await create_event(orm_store, e) for e in events]

    return _seed


class TestEventWrite:
    def test_defaults(self):
        event = _event("Briefing", date(2025, 3, 1))

        assert event.column_values()["event_type"] == "meeting"
        assert event.column_values()["program_id"] == "all"
        assert event.column_values()["location"] == ""

    def test_empty_optionals_fall_back(self):
        event = _event("Briefing", date(2025, 3, 1), event_type="", program_id=None, notes=None)

        values = event.column_values()
        assert (values["event_type"], values["program_id"], values["notes"]) == ("meeting", "all", "")

    @pytest.mark.parametrize("field", ["event_title", "time"])
    def test_required_text_not_blank(self, field):
        data = {"event_title": "Briefing", "date": date(2025, 3, 1), "time": "10:00", field: "   "}
        with pytest.raises(ValidationError):
            EventWrite(**data)


class TestCrud:
    @pytest.mark.asyncio
    async def test_create_and_get(self, orm_store):
        created = await create_event(orm_store, _event("Briefing", date(2025, 3, 1), location="Hall A"))

        fetched = await get_event(orm_store, created.id)

        assert fetched.event_title == "Briefing"
        assert fetched.location == "Hall A"
        assert fetched.event_type == "meeting"
        assert fetched.created_at is not None

    @pytest.mark.asyncio
    async def test_get_missing(self, orm_store):
        with pytest.raises(EventNotFoundError) as exc_info:
            await get_event(orm_store, 404)

        assert exc_info.value.message == "Event not found"
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, orm_store):
        created = await create_event(orm_store, _event("Briefing", date(2025, 3, 1), notes="old"))
        event_id = created.id

        await update_event(orm_store, event_id, _event("Debrief", date(2025, 3, 2), "16:30"))
        await orm_store.refresh(created)

        fetched = await get_event(orm_store, event_id)
        assert (fetched.event_title, fetched.date, fetched.time) == ("Debrief", date(2025, 3, 2), "16:30")
        assert fetched.notes == ""

    @pytest.mark.asyncio
    async def test_update_missing(self, orm_store):
        with pytest.raises(EventNotFoundError):
            await update_event(orm_store, 99, _event("Debrief", date(2025, 3, 2)))

    @pytest.mark.asyncio
    async def test_delete(self, orm_store):
        created = await create_event(orm_store, _event("Briefing", date(2025, 3, 1)))

        await delete_event(orm_store, created.id)

        with pytest.raises(EventNotFoundError):
            await delete_event(orm_store, created.id)


class TestListing:
    @pytest.mark.asyncio
    async def test_ordered_by_date_then_time(self, orm_store, seed_events):
        await seed_events()

        events = await list_events(orm_store)

        assert [e.event_title for e in events] == [
            "Faculty meeting",
            "Panel interview",
            "Fee deadline",
            "Orientation",
        ]

    @pytest.mark.asyncio
    async def test_filters(self, orm_store, seed_events):
        await seed_events()

        on_day = await list_events(orm_store, on_date=date(2025, 3, 5))
        in_range = await list_events(orm_store, start_date=date(2025, 3, 6), end_date=date(2025, 4, 1))
        pgp = await list_events(orm_store, program_id="pgp")
        everything = await list_events(orm_store, program_id="all", event_type="all")
        deadlines = await list_events(orm_store, event_type="deadline")

        assert len(on_day) == 2
        assert [e.event_title for e in in_range] == ["Fee deadline", "Orientation"]
        assert [e.event_title for e in pgp] == ["Panel interview", "Orientation"]
        assert len(everything) == 4
        assert [e.event_title for e in deadlines] == ["Fee deadline"]

    @pytest.mark.asyncio
    async def test_range_needs_both_ends(self, orm_store, seed_events):
        await seed_events()

        assert len(await list_events(orm_store, start_date=date(2025, 4, 1))) == 4


class TestCalendar:
    @pytest.mark.asyncio
    async def test_days_of_month(self, orm_store, seed_events):
        await seed_events()

        days = await get_calendar(orm_store, 2025, 3)

        assert [d.model_dump() for d in days] == [
            {"event_date": date(2025, 3, 5), "event_count": 2, "event_titles": "Faculty meeting, Panel interview"},
            {"event_date": date(2025, 3, 20), "event_count": 1, "event_titles": "Fee deadline"},
        ]

    @pytest.mark.asyncio
    async def test_empty_month(self, orm_store, seed_events):
        await seed_events()

        assert await get_calendar(orm_store, 2025, 6) == []

    def test_month_bounds_wrap_year(self):
        assert month_bounds(2025, 12) == (date(2025, 12, 1), date(2026, 1, 1))

    def test_invalid_month(self):
        with pytest.raises(InvalidMonthError):
            month_bounds(2025, 13)


class TestUpcoming:
    @pytest.mark.asyncio
    async def test_next_seven_days(self, orm_store, seed_events):
        await seed_events()

        events = await get_upcoming_week(orm_store, today=date(2025, 3, 14))

        assert [e.event_title for e in events] == ["Fee deadline"]

    @pytest.mark.asyncio
    async def test_limited_to_ten(self, orm_store):
        for hour in range(12):
            await create_event(orm_store, _event(f"Slot {hour}", date(2025, 3, 1), f"{hour:02d}:00"))

        events = await get_upcoming_week(orm_store, today=date(2025, 3, 1))

        assert len(events) == 10
        assert events[0].event_title == "Slot 0"
