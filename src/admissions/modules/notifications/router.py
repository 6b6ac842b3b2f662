"""
Notifications Router

Endpoints:
- GET /notifications/recent-activities - Latest admissions activity
- GET /notifications/important-dates - Calendar deadlines and upcoming slots
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.auth import CurrentUser, get_current_user
from admissions.core.database import get_db
from admissions.core.responses import ApiResponse

from . import service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/recent-activities",
    response_model=ApiResponse[list[dict[str, Any]]],
    summary="Recent Activities",
)
async def get_recent_activities(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """The five most recent admissions activities, each with a human readable age."""
    try:
        activities = await service.get_recent_activities(db)
    except Exception as e:
        logger.exception(f"Recent activities error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": str(e), "message": "Error fetching recent activities"},
        ) from e

    return ApiResponse(data=activities)


@router.get(
    "/important-dates",
    response_model=ApiResponse[list[dict[str, Any]]],
    summary="Important Dates",
)
async def get_important_dates(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """Up to eight admission calendar dates, earliest first."""
    try:
        dates = await service.get_important_dates(db)
    except Exception as e:
        logger.exception(f"Important dates error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": str(e), "message": "Error fetching important dates"},
        ) from e

    return ApiResponse(data=dates)
