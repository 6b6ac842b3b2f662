"""
Overview Pivot

Turns the flat (course x phase) aggregate rows of the overview query into one
entry per course with an ordered list of phases, each carrying its metrics.
"""

from typing import Any

from .safe_query import Row, normalize_number

# (metric name, row column), in display order
PHASE_METRICS: tuple[tuple[str, str], ...] = (
    ("Commitment Fee", "commitment_fee"),
    ("Not Started", "not_started_count"),
    ("In Progress", "in_progress_count"),
    ("Completed", "completed_count"),
    ("Verification Pending", "verification_pending_count"),
    ("Verified", "verified_count"),
    ("Average Progress %", "avg_progress_percentage"),
)


def _phase_entry(row: Row) -> dict[str, Any]:
    return {
        "phase_name": row["phase_name"],
        "phase_order": row.get("phase_order"),
        "statistics": [
            {"metric_name": name, "value": normalize_number(row.get(column))}
            for name, column in PHASE_METRICS
        ],
    }


def pivot_overview(rows: list[Row]) -> list[dict[str, Any]]:
    """
    Group overview rows by course.

    Rows must arrive ordered by course code then phase order. A course entry is
    created the first time its code is seen (taking ``total_enrolled`` from
    that row); a phase is appended only when the row's phase name is not NULL, so a
    course without phases keeps ``phases == []``.
    """
    courses: dict[str, dict[str, Any]] = {}

    for row in rows:
        code = row["course_code"]
        course = courses.get(code)
        if course is None:
            course = {
                "course_code": code,
                "course_name": row.get("course_name"),
                "total_enrolled": normalize_number(row.get("total_enrolled")),
                "phases": [],
            }
            courses[code] = course

        if row.get("phase_name") is not None:
            course["phases"].append(_phase_entry(row))

    return list(courses.values())
