"""
Unit tests for the notifications service.

These tests cover:
- Age and date formatting helpers
- Merging and ordering of recent activities
- Important dates from calendar tables and upcoming slot days
"""

from datetime import date, datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from admissions.modules.notifications.service import (
    as_datetime,
    format_date,
    get_important_dates,
    get_recent_activities,
    time_ago,
)

NOW = datetime(2025, 3, 15, 12, 0, 0)


class TestTimeAgo:
    @pytest.mark.parametrize(
        ("delta", "expected"),
        [
            (timedelta(days=2, hours=3), "2 days ago"),
            (timedelta(days=1), "1 day ago"),
            (timedelta(hours=5, minutes=59), "5 hours ago"),
            (timedelta(hours=1), "1 hour ago"),
            (timedelta(minutes=12), "12 minutes ago"),
            (timedelta(seconds=20), "1 minute ago"),
        ],
    )
    def test_buckets(self, delta, expected):
        assert time_ago(NOW - delta, NOW) == expected


class TestFormatting:
    def test_format_date(self):
        assert format_date(date(2025, 3, 5)) == "March 5, 2025"

    def test_as_datetime_from_string(self):
        assert as_datetime("2025-03-15 10:00:00") == datetime(2025, 3, 15, 10, 0, 0)

    def test_as_datetime_from_date(self):
        assert as_datetime(date(2025, 3, 15)) == datetime(2025, 3, 15)

    def test_as_datetime_rejects_garbage(self):
        assert as_datetime("not a date") is None
        assert as_datetime(None) is None


class TestRecentActivitiesMerge:
    @pytest.mark.asyncio
    async def test_newest_first_top_five(self, mock_db):
        async def applications(_db, config, _since):
            if config.label == "PGP":
                return [{"activity_time": NOW - timedelta(hours=h)} for h in (1, 5, 30)]
            return [{"activity_time": NOW - timedelta(minutes=10)}]

        with patch("admissions.modules.notifications.service.repository") as mock_repo:
            mock_repo.get_recent_applications = AsyncMock(side_effect=applications)
            mock_repo.get_verification_batches = AsyncMock(
                return_value=[{"activity_time": NOW - timedelta(hours=3), "count": 4}]
            )
            mock_repo.get_slot_booking_batches = AsyncMock(
                return_value=[{"activity_time": NOW - timedelta(hours=2), "count": 7}]
            )

            activities = await get_recent_activities(mock_db, now=NOW)

        assert len(activities) == 5
        assert [a["timeAgo"] for a in activities] == [
            "10 minutes ago",
            "1 hour ago",
            "2 hours ago",
            "3 hours ago",
            "5 hours ago",
        ]
        assert activities[0]["program"] == "PhD"
        assert activities[2]["description"] == "PGP - 7 Students"
        assert activities[3]["category"] == "verification"

    @pytest.mark.asyncio
    async def test_empty_sources_give_empty_list(self, mock_db):
        with patch("admissions.modules.notifications.service.repository") as mock_repo:
            mock_repo.get_recent_applications = AsyncMock(return_value=[])
            mock_repo.get_verification_batches = AsyncMock(return_value=[])
            mock_repo.get_slot_booking_batches = AsyncMock(return_value=[])

            assert await get_recent_activities(mock_db, now=NOW) == []


class TestAgainstStore:
    @pytest.mark.asyncio
    async def test_recent_applications_use_available_timestamp(self, store, run_sql):
        await run_sql(
            "CREATE TABLE iim_phd_application (id INTEGER PRIMARY KEY, added_at TEXT)",
            "INSERT INTO iim_phd_application (added_at) VALUES "
            "('2025-03-15 10:00:00'), ('2025-03-14 12:00:00'), ('2025-01-01 00:00:00')",
        )

        activities = await get_recent_activities(store, now=NOW)

        assert [(a["program"], a["timeAgo"]) for a in activities] == [
            ("PhD", "2 hours ago"),
            ("PhD", "1 day ago"),
        ]
        assert activities[0]["time"] == "2025-03-15T10:00:00"

    @pytest.mark.asyncio
    async def test_empty_store(self, store):
        assert await get_recent_activities(store, now=NOW) == []
        assert await get_important_dates(store, today=NOW.date()) == []

    @pytest.mark.asyncio
    async def test_important_dates(self, store, run_sql):
        await run_sql(
            "CREATE TABLE iim_phd_calendar (id INTEGER PRIMARY KEY, announcement_no INTEGER, "
            "announcement_offer_date TEXT, commitment_fee_last_date TEXT)",
            "INSERT INTO iim_phd_calendar (announcement_no, announcement_offer_date, commitment_fee_last_date) "
            "VALUES (3, '2025-03-20', '2025-04-01')",
            "CREATE TABLE iim_pgpmci_slot (id INTEGER PRIMARY KEY, slot_date TEXT)",
            "INSERT INTO iim_pgpmci_slot (slot_date) VALUES ('2025-03-18'), ('2025-03-18'), ('2025-05-01')",
        )

        events = await get_important_dates(store, today=NOW.date())

        assert [(e["date"], e["title"]) for e in events] == [
            ("2025-03-18", "Interview Slots - PGP"),
            ("2025-03-20", "Announcement Offer Date - PhD"),
            ("2025-04-01", "Commitment Fee Deadline - PhD"),
        ]
        assert events[0]["description"] == "2 slots available"
        assert events[0]["formattedDate"] == "March 18, 2025"
        assert events[1]["description"] == "Announcement #3"
