"""
Schedule Schemas
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import ALL_PROGRAMS, DEFAULT_EVENT_TYPE


class EventWrite(BaseModel):
    """Body of create and update requests. Updates replace every field."""

    event_title: str = Field(..., min_length=1, max_length=255)
    date: date
    time: str = Field(..., min_length=1, max_length=20)
    location: str | None = Field(default="", max_length=255)
    event_type: str | None = Field(default=DEFAULT_EVENT_TYPE, max_length=50)
    program_id: str | None = Field(default=ALL_PROGRAMS, max_length=20)
    notes: str | None = ""

    @field_validator("event_title", "time")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    def column_values(self) -> dict:
        """Values to store, with empty optionals replaced by their defaults."""
        return {
            "event_title": self.event_title,
            "date": self.date,
            "time": self.time,
            "location": self.location or "",
            "event_type": self.event_type or DEFAULT_EVENT_TYPE,
            "program_id": self.program_id or ALL_PROGRAMS,
            "notes": self.notes or "",
        }


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_title: str
    date: date
    time: str
    location: str
    event_type: str
    program_id: str
    notes: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CalendarDay(BaseModel):
    event_date: date
    event_count: int
    event_titles: str
