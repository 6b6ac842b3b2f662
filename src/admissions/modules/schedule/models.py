"""
Schedule Models
"""

import datetime

from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from admissions.modules.shared import BaseModel, TimestampMixin

ALL_PROGRAMS = "all"
DEFAULT_EVENT_TYPE = "meeting"


class ScheduleEvent(TimestampMixin, BaseModel):
    """A dated admissions event (interview, meeting, deadline...)."""

    __tablename__ = "schedule_events"

    event_title: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    # Free-form, e.g. "10:30" or "10:30 AM"
    time: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    event_type: Mapped[str] = mapped_column(String(50), default=DEFAULT_EVENT_TYPE, nullable=False)
    program_id: Mapped[str] = mapped_column(String(20), default=ALL_PROGRAMS, nullable=False, index=True)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)

    def __repr__(self) -> str:
        return f"<ScheduleEvent(id={self.id}, date={self.date}, title={self.event_title})>"
