"""
Dashboard Router

Endpoints:
- GET /dashboard/overview - Course/phase progress overview
- GET /dashboard/home-summary - Cross-program quick stats
- GET /dashboard/{pgp,phd,ephd,emba}-summary - Program summary reports
- GET /dashboard/programs/{program}/report - Program summary report by slug
- GET /dashboard/phase/{course_code}/{phase_name} - Phase progress listing
- GET /dashboard/courses/{course_id}/phases/{phase_id}/progress - Phase progress listing

All endpoints require a valid access token.
"""

import logging
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.auth import CurrentUser, get_current_user
from admissions.core.database import get_db
from admissions.core.responses import ApiResponse

from . import service
from .programs import Program, UnknownProgramError
from .schemas import HomeSummary, OverviewCourse

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================
# Helper Functions
# ============================================


def _internal_error(message: str, e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": str(e), "message": message},
    )


def _handle_program_error(e: UnknownProgramError) -> NoReturn:
    raise HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


async def _program_report(db: AsyncSession, program: str | Program, user: CurrentUser) -> ApiResponse:
    try:
        report = await service.build_program_report(db, program)
    except UnknownProgramError as e:
        _handle_program_error(e)
    except Exception as e:
        logger.exception(f"Summary report error for {program}: {e}")
        raise _internal_error("Error fetching dashboard data", e) from e

    logger.info(f"User {user.id} fetched {program} summary")
    return ApiResponse(data=report)


# ============================================
# Overview
# ============================================


@router.get(
    "/overview",
    response_model=ApiResponse[list[OverviewCourse]],
    summary="Dashboard Overview",
    description="""
Per-course overview of phase progress.

Each course carries its active enrollment count and, per phase, the metrics
Commitment Fee, Not Started, In Progress, Completed, Verification Pending,
Verified and Average Progress %. Courses without phases have `phases: []`.
""",
)
async def get_overview(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        courses = await service.get_overview(db)
    except Exception as e:
        logger.exception(f"Dashboard overview error: {e}")
        raise _internal_error("Error fetching dashboard data", e) from e

    logger.info(f"User {user.id} fetched dashboard overview ({len(courses)} courses)")
    return ApiResponse(data=courses)


@router.get(
    "/home-summary",
    response_model=ApiResponse[HomeSummary],
    summary="Home Summary",
)
async def get_home_summary(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """Application totals across programs with each program's share."""
    try:
        summary = await service.build_home_summary(db)
    except Exception as e:
        logger.exception(f"Home summary error: {e}")
        raise _internal_error("Error fetching home dashboard data", e) from e

    return ApiResponse(data=summary)


# ============================================
# Program Reports
# ============================================


@router.get(
    "/pgp-summary",
    response_model=ApiResponse[dict[str, Any]],
    summary="PGP Summary",
)
async def get_pgp_summary(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    return await _program_report(db, Program.PGP, user)


@router.get(
    "/phd-summary",
    response_model=ApiResponse[dict[str, Any]],
    summary="PhD Summary",
)
async def get_phd_summary(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    return await _program_report(db, Program.PHD, user)


@router.get(
    "/ephd-summary",
    response_model=ApiResponse[dict[str, Any]],
    summary="Executive PhD Summary",
)
async def get_ephd_summary(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    return await _program_report(db, Program.EPHD, user)


@router.get(
    "/emba-summary",
    response_model=ApiResponse[dict[str, Any]],
    summary="EMBA Summary",
)
async def get_emba_summary(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    return await _program_report(db, Program.EMBA, user)


@router.get(
    "/programs/{program}/report",
    response_model=ApiResponse[dict[str, Any]],
    summary="Program Summary",
    description="Summary report for `pgp`, `phd`, `ephd` or `emba` (case-insensitive).",
    responses={400: {"description": "Unknown program"}},
)
async def get_program_report(
    program: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    return await _program_report(db, program, user)


# ============================================
# Phase Progress
# ============================================


@router.get(
    "/phase/{course_code}/{phase_name}",
    response_model=ApiResponse[list[dict[str, Any]]],
    summary="Phase Progress by Name",
)
async def get_phase_progress(
    course_code: str,
    phase_name: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """Progress of every enrolled user in one phase, most recently updated first."""
    try:
        rows = await service.get_phase_progress(db, course_code, phase_name)
    except Exception as e:
        logger.exception(f"Phase progress error: {e}")
        raise _internal_error("Error fetching phase progress data", e) from e

    return ApiResponse(data=rows)


@router.get(
    "/courses/{course_id}/phases/{phase_id}/progress",
    response_model=ApiResponse[list[dict[str, Any]]],
    summary="Phase Progress by Id",
)
async def get_phase_progress_by_ids(
    course_id: int,
    phase_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        rows = await service.get_phase_progress_by_ids(db, course_id, phase_id)
    except Exception as e:
        logger.exception(f"Phase progress error: {e}")
        raise _internal_error("Error fetching phase progress data", e) from e

    return ApiResponse(data=rows)
