"""
Safe Query Executor

Runs parameterized read statements for the dashboard and notification
aggregations. A failing statement (missing table or column, driver error,
timeout) is logged with its context label and turned into a failed
``QueryResult`` instead of an exception, so one broken sub-query never takes
down a whole report.

Only database-level failures are absorbed. Anything else (a bad parameter
type, a bug in the caller) propagates.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from sqlalchemy import TextClause, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.config import settings

logger = logging.getLogger(__name__)

Row = dict[str, Any]


@dataclass(frozen=True)
class QueryResult:
    """Outcome of one statement: either rows, or the error that replaced them."""

    rows: list[Row] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def rows_or(self, default: list[Row]) -> list[Row]:
        return self.rows if self.ok else default

    def first_or(self, default: Row | None) -> Row | None:
        if self.ok and self.rows:
            return self.rows[0]
        return default


async def rollback_quietly(db: AsyncSession, context: str) -> None:
    """Roll back after a failed statement so the session can be reused."""
    try:
        await db.rollback()
    except SQLAlchemyError as e:
        logger.warning(f"{context}: rollback after failure also failed: {e}")


async def _execute(db: AsyncSession, statement: TextClause, params: dict[str, Any]) -> list[Row]:
    timeout = settings.query_timeout_seconds
    if timeout and timeout > 0:
        result = await asyncio.wait_for(db.execute(statement, params), timeout)
    else:
        result = await db.execute(statement, params)

    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings().all()]


async def run_query(
    db: AsyncSession,
    sql: str | TextClause,
    params: dict[str, Any] | None = None,
    context: str = "Query",
) -> QueryResult:
    """
    Execute a statement and capture database failures.

    Args:
        db: Session to run on
        sql: SQL text with named ``:param`` placeholders
        params: Bound parameter values
        context: Label used in the log line when the statement fails

    Returns:
        QueryResult with the rows as plain dicts, or with ``error`` set
    """
    statement = text(sql) if isinstance(sql, str) else sql

    try:
        rows = await _execute(db, statement, params or {})
    except TimeoutError:
        logger.warning(f"{context} failed: timed out after {settings.query_timeout_seconds}s")
        await rollback_quietly(db, context)
        return QueryResult(error="query timed out")
    except SQLAlchemyError as e:
        logger.warning(f"{context} failed: {e}")
        await rollback_quietly(db, context)
        return QueryResult(error=str(e) or e.__class__.__name__)

    return QueryResult(rows=rows)


async def safe_query(
    db: AsyncSession,
    sql: str | TextClause,
    params: dict[str, Any] | None = None,
    context: str = "Query",
) -> list[Row]:
    """Rows of the statement, or ``[]`` if it failed."""
    result = await run_query(db, sql, params, context)
    return result.rows_or([])


async def safe_first(
    db: AsyncSession,
    sql: str | TextClause,
    params: dict[str, Any] | None = None,
    context: str = "Query",
) -> Row | None:
    """First row of the statement, or None if it failed or returned nothing."""
    result = await run_query(db, sql, params, context)
    return result.first_or(None)


def normalize_number(value: Any) -> int | float:
    """
    Coerce an aggregate value to a non-negative JSON number.

    SQL NULL (e.g. SUM over zero rows) becomes 0, ``Decimal`` becomes int when
    integral and float otherwise.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, Decimal):
        value = int(value) if value == value.to_integral_value() else float(value)
    elif not isinstance(value, (int, float)):
        try:
            value = float(value)
        except (TypeError, ValueError):
            return 0
        if value.is_integer():
            value = int(value)
    return max(value, 0)


def normalize_row(row: Row) -> Row:
    """Convert ``Decimal`` values in a row to JSON numbers, leaving the rest alone."""
    return {
        key: normalize_number(value) if isinstance(value, Decimal) else value
        for key, value in row.items()
    }


__all__ = [
    "QueryResult",
    "Row",
    "normalize_number",
    "normalize_row",
    "rollback_quietly",
    "run_query",
    "safe_first",
    "safe_query",
]
