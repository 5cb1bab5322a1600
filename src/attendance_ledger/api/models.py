"""Pydantic models for API request payloads."""

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class AttendanceRequest(_CamelModel):
    """Check-in submitted by the scanner or the manual entry form."""

    session_id: str = Field(default="", alias="sessionId")
    attendee_id: str = Field(default="", alias="attendeeId")
    method: str = ""
    attendee_name: str | None = Field(default=None, alias="attendeeName")


class CreateClientRequest(_CamelModel):
    """New attendee details."""

    name: str = ""
    email: str = ""


class UpdateClientRequest(_CamelModel):
    """Attendee fields to change."""

    id: str = ""
    name: str | None = None
    email: str | None = None


class CreateSessionRequest(_CamelModel):
    """Session details, with optional recurrence."""

    title: str = ""
    date: str = ""
    time: str = ""
    is_recurring: bool = Field(default=False, alias="isRecurring")
    recurring_weeks: int | None = Field(default=None, alias="recurringWeeks")
    recurring_interval: int | None = Field(default=None, alias="recurringInterval")
