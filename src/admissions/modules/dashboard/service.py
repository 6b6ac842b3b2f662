"""
Dashboard Service

Business logic behind the dashboard endpoints: per-program reports, the
course/phase overview, phase progress listings and the cross-program home
summary.
"""

import logging
import math
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from . import repository
from .assembler import assemble_report
from .introspection import first_existing_column
from .overview import pivot_overview
from .programs import PROGRAMS, Program, UnknownProgramError, get_program_config
from .safe_query import normalize_number, normalize_row
from .templates import Report, report_queries

logger = logging.getLogger(__name__)

SLOT_DATE_CANDIDATES = ("slot_date", "date")
DEFAULT_SLOT_DATE_COLUMN = "slot_date"


__all__ = [
    "UnknownProgramError",
    "build_home_summary",
    "build_program_report",
    "get_overview",
    "get_phase_progress",
    "get_phase_progress_by_ids",
    "percentage",
]


async def build_program_report(db: AsyncSession, program: str | Program) -> Report:
    """
    Assemble the summary report of one program.

    The slot date column is looked up on every call since deployments differ
    (``slot_date`` or ``date``).

    Raises:
        UnknownProgramError: If ``program`` is not a registered program slug
    """
    config = get_program_config(program)

    slot_date_column = await first_existing_column(
        db, config.slot_table, SLOT_DATE_CANDIDATES, DEFAULT_SLOT_DATE_COLUMN
    )

    report = await assemble_report(db, report_queries(config, slot_date_column))
    logger.info(f"Built {config.label} summary report (slot date column: {slot_date_column})")
    return report


async def get_overview(db: AsyncSession) -> list[dict[str, Any]]:
    """Course overview with per-phase progress metrics. Query errors propagate."""
    rows = await repository.get_overview_rows(db)
    return pivot_overview(rows)


async def get_phase_progress(db: AsyncSession, course_code: str, phase_name: str) -> list[dict]:
    rows = await repository.get_phase_progress_by_name(db, course_code, phase_name)
    return [normalize_row(row) for row in rows]


async def get_phase_progress_by_ids(db: AsyncSession, course_id: int, phase_id: int) -> list[dict]:
    rows = await repository.get_phase_progress_by_ids(db, course_id, phase_id)
    return [normalize_row(row) for row in rows]


def percentage(part: int | float, total: int | float) -> int:
    """Share of ``total`` as a whole percent, rounded half-up. 0 when total is 0."""
    if total <= 0:
        return 0
    return math.floor(part * 100 / total + 0.5)


async def build_home_summary(db: AsyncSession) -> dict[str, Any]:
    """
    Quick stats across all programs plus a per-program breakdown.

    A program whose application table cannot be queried is left out of
    ``programStats`` and contributes nothing to the totals.
    """
    program_stats: list[dict[str, Any]] = []

    for config in PROGRAMS.values():
        result = await repository.get_application_totals(db, config)
        if not result.ok:
            continue

        row = result.first_or({}) or {}
        program_stats.append(
            {
                "program": config.label,
                "applications": normalize_number(row.get("total_applications")),
                "admitted": normalize_number(row.get("admitted")),
                "under_review": normalize_number(row.get("under_review")),
            }
        )

    total_applications = sum(stat["applications"] for stat in program_stats)
    total_admitted = sum(stat["admitted"] for stat in program_stats)
    total_under_review = sum(stat["under_review"] for stat in program_stats)

    for stat in program_stats:
        stat["percentage"] = percentage(stat["applications"], total_applications)

    return {
        "quickStats": {
            "totalApplications": total_applications,
            "totalAdmitted": total_admitted,
            "totalUnderReview": total_under_review,
        },
        "programStats": program_stats,
    }
