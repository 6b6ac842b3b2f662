"""
Dashboard module.

Aggregated views over the admissions store: per-program summary reports,
course/phase overview, phase progress and the home summary.
"""

from .router import router

__all__ = ["router"]
