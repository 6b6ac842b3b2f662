"""
Report Assembler

Runs a report battery and merges the results into the nested report.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from .safe_query import run_query
from .templates import Report, ReportQuery, default_report

logger = logging.getLogger(__name__)


async def assemble_report(db: AsyncSession, queries: Sequence[ReportQuery]) -> Report:
    """
    Execute every query of the battery and fill the report.

    Statements run one after another on the same session (an AsyncSession
    must not be shared by concurrent tasks). A failed statement leaves its
    report paths at their defaults; the other paths are unaffected.
    """
    report = default_report(queries)
    failed = 0

    for query in queries:
        result = await run_query(db, query.sql, query.params, context=query.label)
        if not result.ok:
            failed += 1
            continue
        query.apply(report, result.rows)

    if failed:
        logger.info(f"Report assembled with {failed}/{len(queries)} sub-queries degraded")

    return report
