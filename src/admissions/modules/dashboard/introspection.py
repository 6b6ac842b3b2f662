"""
Schema Introspection

Program tables differ between deployments (``slot_date`` vs ``date``,
``status`` vs ``attendance``, which timestamp column exists). These helpers
look the columns up on every call through the SQLAlchemy inspector, so a
schema change is picked up on the next request. Nothing is cached.
"""

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import inspect
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .safe_query import rollback_quietly

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

TIMESTAMP_CANDIDATES = ("created_at", "updated_at", "submit_time", "added_at")

# Query-level "now" expression used when a table has no timestamp column
NOW_EXPRESSION = "CURRENT_TIMESTAMP"


@dataclass(frozen=True)
class TableColumns:
    exists: bool
    columns: tuple[str, ...] = ()

    def has(self, column: str) -> bool:
        return column in self.columns


def ensure_identifier(name: str) -> str:
    """
    Validate a table or column name before it is interpolated into SQL.

    Raises:
        ValueError: If ``name`` is not a plain SQL identifier
    """
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


async def describe_table(db: AsyncSession, table: str) -> TableColumns:
    """
    Look up whether ``table`` exists and which columns it has.

    A missing table or any database error yields ``TableColumns(exists=False)``.
    """
    ensure_identifier(table)

    def _inspect(sync_conn: Connection) -> TableColumns:
        inspector = inspect(sync_conn)
        if not inspector.has_table(table):
            return TableColumns(exists=False)
        return TableColumns(
            exists=True,
            columns=tuple(col["name"] for col in inspector.get_columns(table)),
        )

    try:
        conn = await db.connection()
        return await conn.run_sync(_inspect)
    except SQLAlchemyError as e:
        logger.warning(f"Table {table} check failed: {e}")
        await rollback_quietly(db, f"Table {table} check")
        return TableColumns(exists=False)


async def has_column(db: AsyncSession, table: str, column: str) -> bool:
    info = await describe_table(db, table)
    return info.has(column)


async def first_existing_column(
    db: AsyncSession,
    table: str,
    candidates: Sequence[str],
    fallback: str,
) -> str:
    """Return the first of ``candidates`` present in ``table``, else ``fallback``."""
    info = await describe_table(db, table)
    for column in candidates:
        if info.has(column):
            return column
    return fallback


async def best_timestamp_column(db: AsyncSession, table: str) -> str:
    """
    Pick the column that best represents when a row was created.

    Priority: created_at, updated_at, submit_time, added_at. Falls back to
    ``CURRENT_TIMESTAMP`` when none exist or the table is absent.
    """
    return await first_existing_column(db, table, TIMESTAMP_CANDIDATES, NOW_EXPRESSION)
