"""
Applicants Router

Endpoints:
- GET /applicants - Paginated applicant list
- GET /applicants/stats/summary - Applicant counts
- GET /applicants/{identifier} - Applicant by id or applicant_id
- PATCH /applicants/{identifier}/offer - Set offer issued flag
- PATCH /applicants/{identifier}/fee - Set fee paid flag
"""

import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from admissions.core.auth import CurrentUser, get_current_user
from admissions.core.database import get_db
from admissions.core.responses import ApiResponse

from . import service
from .schemas import (
    ApplicantListData,
    ApplicantResponse,
    ApplicantStats,
    FeeUpdateRequest,
    OfferUpdateRequest,
)
from .service import MAX_PAGE_SIZE, ApplicantServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: ApplicantServiceError) -> NoReturn:
    raise HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


def _internal_error(message: str, e: Exception) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"error": str(e), "message": message},
    )


@router.get(
    "",
    response_model=ApiResponse[ApplicantListData],
    summary="List Applicants",
)
async def list_applicants(
    page: int = Query(1, ge=1),
    limit: int = Query(service.DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    """Applicants newest first, with pagination metadata."""
    try:
        data = await service.list_applicants(db, page=page, limit=limit)
    except Exception as e:
        logger.exception(f"Error listing applicants: {e}")
        raise _internal_error("Error fetching applicants", e) from e

    return ApiResponse(data=data)


# Declared before /{identifier} so "stats" is not taken as an identifier.
@router.get(
    "/stats/summary",
    response_model=ApiResponse[ApplicantStats],
    summary="Applicant Statistics",
)
async def get_applicant_stats(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        stats = await service.get_stats(db)
    except Exception as e:
        logger.exception(f"Error fetching applicant stats: {e}")
        raise _internal_error("Error fetching applicant statistics", e) from e

    return ApiResponse(data=stats)


@router.get(
    "/{identifier}",
    response_model=ApiResponse[ApplicantResponse],
    summary="Get Applicant",
    description="Numeric identifiers match the record id, anything else matches `applicant_id`.",
    responses={404: {"description": "Applicant not found"}},
)
async def get_applicant(
    identifier: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        applicant = await service.get_applicant(db, identifier)
    except ApplicantServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error fetching applicant {identifier}: {e}")
        raise _internal_error("Error fetching applicant", e) from e

    return ApiResponse(data=applicant)


@router.patch(
    "/{identifier}/offer",
    response_model=ApiResponse[None],
    summary="Update Offer Status",
    responses={404: {"description": "Applicant not found"}},
)
async def update_offer_status(
    identifier: str,
    body: OfferUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        await service.set_offer_issued(db, identifier, body.offer_issued)
    except ApplicantServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating offer status for {identifier}: {e}")
        raise _internal_error("Error updating offer status", e) from e

    return ApiResponse(message="Offer status updated successfully")


@router.patch(
    "/{identifier}/fee",
    response_model=ApiResponse[None],
    summary="Update Fee Status",
    responses={404: {"description": "Applicant not found"}},
)
async def update_fee_status(
    identifier: str,
    body: FeeUpdateRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> ApiResponse:
    try:
        await service.set_fee_paid(db, identifier, body.fee_paid)
    except ApplicantServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating fee status for {identifier}: {e}")
        raise _internal_error("Error updating fee status", e) from e

    return ApiResponse(message="Fee status updated successfully")
