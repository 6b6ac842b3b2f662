"""
Dashboard Repository

Read-only statements behind the dashboard endpoints.

The overview and phase-progress statements run against the API's own tables
and raise on failure. Program-table statements go through the safe query
executor and degrade to a failed ``QueryResult``.
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from .introspection import has_column
from .programs import ProgramConfig
from .safe_query import QueryResult, Row, run_query

_OVERVIEW_SQL = """
    SELECT
        c.course_code,
        c.course_name,
        p.phase_name,
        p.phase_order,
        {commitment_fee} AS commitment_fee,
        COUNT(DISTINCT ue.user_id) AS total_enrolled,
        COUNT(CASE WHEN upp.status = 'not_started' THEN 1 END) AS not_started_count,
        COUNT(CASE WHEN upp.status = 'in_progress' THEN 1 END) AS in_progress_count,
        COUNT(CASE WHEN upp.status = 'completed' THEN 1 END) AS completed_count,
        COUNT(CASE WHEN upp.status = 'verification_pending' THEN 1 END) AS verification_pending_count,
        COUNT(CASE WHEN upp.status = 'verified' THEN 1 END) AS verified_count,
        ROUND(AVG(upp.progress_percentage), 2) AS avg_progress_percentage
    FROM courses c
    LEFT JOIN phases p ON c.id = p.course_id
    LEFT JOIN user_enrollments ue ON c.id = ue.course_id AND ue.status = 'active'
    LEFT JOIN user_phase_progress upp ON p.id = upp.phase_id AND ue.user_id = upp.user_id
    GROUP BY c.id, c.course_code, c.course_name, p.id, p.phase_name, p.phase_order{group_extra}
    ORDER BY c.course_code, p.phase_order
"""

_PHASE_PROGRESS_COLUMNS = """
        u.id AS user_id,
        u.email,
        u.username,
        upp.status,
        upp.started_at,
        upp.completed_at,
        upp.verified_at,
        upp.progress_percentage,
        upp.notes,
        ue.enrollment_date
"""

_PHASE_PROGRESS_FROM = """
    FROM user_phase_progress upp
    JOIN phases p ON upp.phase_id = p.id
    JOIN courses c ON p.course_id = c.id
    JOIN users u ON upp.user_id = u.id
    JOIN user_enrollments ue ON u.id = ue.user_id AND c.id = ue.course_id
"""


async def _fetch_all(db: AsyncSession, sql: str, params: dict[str, Any] | None = None) -> list[Row]:
    result = await db.execute(text(sql), params or {})
    return [dict(row) for row in result.mappings().all()]


async def get_overview_rows(db: AsyncSession) -> list[Row]:
    """Per (course, phase) progress aggregates, ordered by course code and phase order."""
    if await has_column(db, "phases", "commitment_fee"):
        sql = _OVERVIEW_SQL.format(commitment_fee="p.commitment_fee", group_extra=", p.commitment_fee")
    else:
        sql = _OVERVIEW_SQL.format(commitment_fee="0", group_extra="")
    return await _fetch_all(db, sql)


async def get_phase_progress_by_name(
    db: AsyncSession, course_code: str, phase_name: str
) -> list[Row]:
    """Progress rows of one phase, addressed by course code and phase name, newest first."""
    sql = (
        f"SELECT {_PHASE_PROGRESS_COLUMNS} {_PHASE_PROGRESS_FROM} "
        "WHERE c.course_code = :course_code AND p.phase_name = :phase_name "
        "ORDER BY upp.updated_at DESC"
    )
    return await _fetch_all(
        db, sql, {"course_code": course_code.upper(), "phase_name": phase_name}
    )


async def get_phase_progress_by_ids(db: AsyncSession, course_id: int, phase_id: int) -> list[Row]:
    """Progress rows of one phase, addressed by ids, with course and phase names attached."""
    sql = (
        f"SELECT {_PHASE_PROGRESS_COLUMNS}, c.course_code, c.course_name, p.phase_name "
        f"{_PHASE_PROGRESS_FROM} "
        "WHERE c.id = :course_id AND p.id = :phase_id "
        "ORDER BY upp.updated_at DESC"
    )
    return await _fetch_all(db, sql, {"course_id": course_id, "phase_id": phase_id})


async def get_application_totals(db: AsyncSession, config: ProgramConfig) -> QueryResult:
    """Application, admitted and under-review counts for one program."""
    sql = (
        "SELECT COUNT(*) AS total_applications, "
        "COUNT(CASE WHEN commitment_payment = 1 THEN 1 END) AS admitted, "
        "COUNT(CASE WHEN final_submit = 1 AND commitment_payment = 0 THEN 1 END) AS under_review "
        f"FROM {config.application_table}"
    )
    return await run_query(db, sql, context=f"{config.label} home summary query")
