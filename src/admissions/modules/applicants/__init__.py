"""Applicants module."""

from admissions.modules.applicants.models import Applicant, ApplicationStatus
from admissions.modules.applicants.router import router

__all__ = ["Applicant", "ApplicationStatus", "router"]
