"""
Applicants Service
"""

import logging
import math

from sqlalchemy.ext.asyncio import AsyncSession

from admissions.modules.dashboard.safe_query import normalize_number

from . import repository
from .schemas import ApplicantListData, ApplicantResponse, ApplicantStats, Pagination

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class ApplicantServiceError(Exception):
    """Base exception for applicant service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ApplicantNotFoundError(ApplicantServiceError):
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            message="Applicant not found",
            error_code="APPLICANT_NOT_FOUND",
            status_code=404,
        )


async def list_applicants(db: AsyncSession, page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> ApplicantListData:
    """
    Page through applicants, newest first.

    ``page`` is 1-based. ``limit`` is clamped to 1..MAX_PAGE_SIZE.
    """
    page = max(page, 1)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)

    applicants, total = await repository.list_applicants(db, skip=(page - 1) * limit, limit=limit)

    return ApplicantListData(
        applicants=[ApplicantResponse.model_validate(a) for a in applicants],
        pagination=Pagination(
            current_page=page,
            total_pages=math.ceil(total / limit),
            total_applicants=total,
            limit=limit,
        ),
    )


async def get_applicant(db: AsyncSession, identifier: str) -> ApplicantResponse:
    """
    Raises:
        ApplicantNotFoundError: If neither the id nor the applicant_id matches
    """
    applicant = await repository.get_by_identifier(db, identifier)
    if applicant is None:
        raise ApplicantNotFoundError(identifier)
    return ApplicantResponse.model_validate(applicant)


async def get_stats(db: AsyncSession) -> ApplicantStats:
    counts = await repository.get_stats(db)
    return ApplicantStats(**{key: normalize_number(value) for key, value in counts.items()})


async def set_offer_issued(db: AsyncSession, identifier: str, offer_issued: bool) -> None:
    if not await repository.set_offer_issued(db, identifier, offer_issued):
        raise ApplicantNotFoundError(identifier)
    logger.info(f"Applicant {identifier} offer_issued set to {offer_issued}")


async def set_fee_paid(db: AsyncSession, identifier: str, fee_paid: bool) -> None:
    if not await repository.set_fee_paid(db, identifier, fee_paid):
        raise ApplicantNotFoundError(identifier)
    logger.info(f"Applicant {identifier} fee_paid set to {fee_paid}")
