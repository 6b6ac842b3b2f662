"""
Dashboard Schemas

Pydantic models for the structured dashboard responses. Program reports are
returned as plain nested dicts (their shape is defined by the report
templates).
"""

from pydantic import BaseModel, ConfigDict, Field


class PhaseStatistic(BaseModel):
    metric_name: str
    value: int | float = Field(..., ge=0)


class OverviewPhase(BaseModel):
    phase_name: str
    phase_order: int | None = None
    statistics: list[PhaseStatistic]


class OverviewCourse(BaseModel):
    """One course of the dashboard overview."""

    course_code: str
    course_name: str | None = None
    total_enrolled: int = Field(..., ge=0)
    phases: list[OverviewPhase] = Field(default_factory=list)


class QuickStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_applications: int = Field(..., ge=0, alias="totalApplications")
    total_admitted: int = Field(..., ge=0, alias="totalAdmitted")
    total_under_review: int = Field(..., ge=0, alias="totalUnderReview")


class ProgramStat(BaseModel):
    program: str
    applications: int = Field(..., ge=0)
    admitted: int = Field(..., ge=0)
    under_review: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100)


class HomeSummary(BaseModel):
    """Cross-program summary shown on the home screen."""

    model_config = ConfigDict(populate_by_name=True)

    quick_stats: QuickStats = Field(..., alias="quickStats")
    program_stats: list[ProgramStat] = Field(..., alias="programStats")
