"""
Background Jobs

Maintenance jobs run in-process on APScheduler's AsyncIOScheduler.

Modules register their jobs (function plus trigger) at startup through
``register_job``; ``start_scheduler`` then schedules everything registered.
Every job here must be safe to run twice: they only delete rows that are
already expired.
"""

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.base import BaseTrigger

logger = logging.getLogger(__name__)

JobFunc = Callable[[], Coroutine[Any, Any, Any]]

# One run at a time, missed runs collapse into one, five minutes of grace
JOB_DEFAULTS = {
    "coalesce": True,
    "max_instances": 1,
    "misfire_grace_time": 300,
}


@dataclass
class RegisteredJob:
    func: JobFunc
    trigger: BaseTrigger


_jobs: dict[str, RegisteredJob] = {}
_scheduler: AsyncIOScheduler | None = None


def _on_job_event(event: JobExecutionEvent) -> None:
    if event.exception:
        logger.error(f"Background job {event.job_id} raised: {event.exception}", exc_info=event.exception)
    else:
        logger.info(f"Background job {event.job_id} finished")


def _schedule(job_id: str, job: RegisteredJob) -> None:
    assert _scheduler is not None
    _scheduler.add_job(job.func, trigger=job.trigger, id=job_id, replace_existing=True)
    logger.info(f"Scheduled job {job_id} ({job.trigger})")


def _is_running() -> bool:
    return _scheduler is not None and _scheduler.running


def get_scheduler() -> AsyncIOScheduler | None:
    return _scheduler


def register_job(job_id: str, func: JobFunc, trigger: BaseTrigger) -> None:
    """Register ``func`` under ``job_id``; scheduled now if the scheduler is already running."""
    _jobs[job_id] = RegisteredJob(func=func, trigger=trigger)
    if _is_running():
        _schedule(job_id, _jobs[job_id])


async def start_scheduler() -> AsyncIOScheduler:
    """Start the scheduler with every registered job. Idempotent."""
    global _scheduler

    if _is_running():
        return _scheduler

    _scheduler = AsyncIOScheduler(timezone="UTC", job_defaults=JOB_DEFAULTS)
    _scheduler.add_listener(_on_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
    for job_id, job in _jobs.items():
        _schedule(job_id, job)
    _scheduler.start()

    logger.info(f"Scheduler started ({len(_jobs)} jobs)")
    return _scheduler


async def stop_scheduler() -> None:
    """Shut the scheduler down, letting a running job finish."""
    global _scheduler

    if not _is_running():
        return

    _scheduler.shutdown(wait=True)
    _scheduler = None
    logger.info("Scheduler stopped")


async def trigger_job_manually(job_id: str) -> dict[str, Any]:
    """
    Run a registered job now, outside its schedule.

    Failures are reported in the result rather than raised.

    Raises:
        ValueError: If no job is registered under ``job_id``
    """
    job = _jobs.get(job_id)
    if job is None:
        raise ValueError(f"Unknown job {job_id!r}; registered: {sorted(_jobs)}")

    result: dict[str, Any] = {
        "job_id": job_id,
        "status": "success",
        "executed_at": datetime.now(UTC).isoformat(),
    }
    logger.info(f"Running job {job_id} on demand")

    try:
        await job.func()
    except Exception as e:
        logger.exception(f"On-demand run of {job_id} failed: {e}")
        result.update(status="error", error=str(e))

    return result


def list_registered_jobs() -> list[dict[str, Any]]:
    """Registered jobs; once the scheduler runs, also their next run and pause state."""
    listing = []
    for job_id in _jobs:
        entry: dict[str, Any] = {"job_id": job_id, "registered": True}
        if _scheduler is not None:
            scheduled = _scheduler.get_job(job_id)
            next_run = scheduled.next_run_time if scheduled else None
            entry["next_run_time"] = next_run.isoformat() if next_run else None
            entry["is_paused"] = next_run is None
        listing.append(entry)
    return listing


def _toggle(job_id: str, pause: bool) -> bool:
    if _scheduler is None or _scheduler.get_job(job_id) is None:
        logger.warning(f"Cannot {'pause' if pause else 'resume'} {job_id}: not scheduled")
        return False

    if pause:
        _scheduler.pause_job(job_id)
    else:
        _scheduler.resume_job(job_id)
    logger.info(f"Job {job_id} {'paused' if pause else 'resumed'}")
    return True


def pause_job(job_id: str) -> bool:
    return _toggle(job_id, pause=True)


def resume_job(job_id: str) -> bool:
    return _toggle(job_id, pause=False)
