"""
Admissions Admin API - application entry point.

Run with ``uvicorn admissions.main:app``. Everything the API serves is mounted
under ``/api``; ``/health`` and ``/ready`` sit at the root for the load
balancer, and ``/debug/*`` exists only in development.
"""

from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from admissions.api import api_router
from admissions.core import database
from admissions.core.config import settings
from admissions.core.database import close_db, init_db
from admissions.core.redis import close_redis, get_redis, init_redis
from admissions.core.responses import register_exception_handlers
from admissions.core.scheduler import (
    list_registered_jobs,
    pause_job,
    resume_job,
    start_scheduler,
    stop_scheduler,
    trigger_job_manually,
)
from admissions.modules.auth.jobs import register_auth_jobs


async def _startup_step(name: str, step: Callable[[], Awaitable[object]]) -> None:
    # Outside production a failed dependency is reported and the API still boots
    try:
        await step()
    except Exception as e:
        print(f"[FAIL] {name}: {e}")
        if settings.is_production:
            raise
    else:
        print(f"[OK] {name}")


async def _start_jobs() -> None:
    register_auth_jobs()
    await start_scheduler()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    print(f"Admissions Admin API starting ({settings.python_env})")

    await _startup_step("Redis", init_redis)
    await _startup_step("Database", init_db)
    await _startup_step("Background jobs", _start_jobs)

    yield

    print("Admissions Admin API shutting down")
    await stop_scheduler()
    await close_redis()
    await close_db()
    print("[OK] Shutdown complete")


app = FastAPI(
    title="Admissions Admin API",
    description="Admissions office dashboard, applicants and schedule API",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    return {"service": "Admissions Admin API", "environment": settings.python_env}


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness probe."""
    return {"status": "ready"}


# ============================================
# Debug Endpoints (development only)
# ============================================


def _require_development() -> None:
    if not settings.is_development:
        raise HTTPException(status_code=404, detail="Not Found")


@app.get("/debug/connections", tags=["Debug"])
async def debug_connections() -> dict[str, str]:
    """Round-trip the database and Redis."""
    _require_development()
    status: dict[str, str] = {}

    try:
        async with database.async_session_maker() as session:
            await session.execute(text("SELECT 1"))
        status["database"] = "ok"
    except Exception as e:
        status["database"] = f"error: {e}"

    client = get_redis()
    if client is None:
        status["redis"] = "not connected (memory rate limits)"
    else:
        try:
            await client.ping()
            status["redis"] = "ok"
        except Exception as e:
            status["redis"] = f"error: {e}"

    return status


@app.get("/debug/jobs", tags=["Debug"])
async def debug_list_jobs():
    _require_development()
    return {"jobs": list_registered_jobs()}


@app.post("/debug/jobs/{job_id}/{action}", tags=["Debug"])
async def debug_job_action(job_id: str, action: str):
    """``action`` is one of ``trigger`` (e.g. auth_purge_expired_credentials), ``pause`` or ``resume``."""
    _require_development()
    if action == "trigger":
        try:
            return await trigger_job_manually(job_id)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e)) from e
    if action == "pause":
        return {"job_id": job_id, "paused": pause_job(job_id)}
    if action == "resume":
        return {"job_id": job_id, "resumed": resume_job(job_id)}
    raise HTTPException(status_code=400, detail=f"Unknown action: {action}")
