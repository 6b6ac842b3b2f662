"""
Applicant Schemas
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class ApplicantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    applicant_id: str
    name: str
    email: str | None = None
    phone: str | None = None
    program_applied_for: str | None = None
    application_status: str
    gender: str | None = None
    source: str | None = None
    offer_issued: bool
    fee_paid: bool
    applied_date: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(..., alias="currentPage")
    total_pages: int = Field(..., alias="totalPages")
    total_applicants: int = Field(..., alias="totalApplicants")
    limit: int


class ApplicantListData(BaseModel):
    """Paginated applicant list."""

    applicants: list[ApplicantResponse]
    pagination: Pagination


class OfferUpdateRequest(BaseModel):
    offer_issued: bool


class FeeUpdateRequest(BaseModel):
    fee_paid: bool


class ApplicantStats(BaseModel):
    """Counts for the applicants overview."""

    total_applicants: int = Field(..., ge=0)
    admitted: int = Field(..., ge=0)
    under_review: int = Field(..., ge=0)
    rejected: int = Field(..., ge=0)
    offers_issued: int = Field(..., ge=0)
    fees_paid: int = Field(..., ge=0)
    pgp_applicants: int = Field(..., ge=0)
    phd_applicants: int = Field(..., ge=0)
    ephd_applicants: int = Field(..., ge=0)
    emba_applicants: int = Field(..., ge=0)
