"""Schedule events module."""

from admissions.modules.schedule.models import ScheduleEvent
from admissions.modules.schedule.router import router

__all__ = ["ScheduleEvent", "router"]
