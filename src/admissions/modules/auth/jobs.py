"""
Authentication Background Jobs

- Purge expired credentials (hourly): deletes login sessions and password
  reset codes whose expiry has passed.
"""

import logging

from apscheduler.triggers.interval import IntervalTrigger

from admissions.core.database import async_session_maker
from admissions.core.scheduler import register_job
from admissions.modules.auth import service

logger = logging.getLogger(__name__)

JOB_ID_PURGE_EXPIRED = "auth_purge_expired_credentials"
PURGE_INTERVAL_HOURS = 1


async def purge_expired_credentials() -> dict[str, int]:
    """Delete expired sessions and password reset codes."""
    async with async_session_maker() as db:
        removed = await service.purge_expired_credentials(db)

    logger.info(
        f"Purged {removed['sessions']} expired sessions and "
        f"{removed['password_resets']} expired password resets"
    )
    return removed


def register_auth_jobs() -> None:
    """Register authentication jobs with the scheduler."""
    register_job(
        job_id=JOB_ID_PURGE_EXPIRED,
        func=purge_expired_credentials,
        trigger=IntervalTrigger(hours=PURGE_INTERVAL_HOURS),
    )
