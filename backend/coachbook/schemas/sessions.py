"""Request/response models for the session endpoints; times are "HH:MM" at the edge."""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from coachbook.models import SessionType
from coachbook.services.timeslots import format_hhmm, parse_hhmm


def _coerce_time(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return parse_hhmm(value)
        except ValueError as e:
            raise ValueError("time must be HH:MM (24h)") from e
    return value


class TimeRange(BaseModel):
    """Same-day wall-clock interval; start strictly before end."""

    start_time: time
    end_time: time

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def _parse_time(cls, value: Any) -> Any:
        return _coerce_time(value)

    @model_validator(mode="after")
    def _check_order(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class Exercise(BaseModel):
    """One activity performed during a completed session."""

    name: str = Field(min_length=1, max_length=255)
    sets: Optional[int] = Field(default=None, ge=0)
    reps: Optional[int] = Field(default=None, ge=0)
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


class BookSessionRequest(TimeRange):
    coach_id: str
    session_date: date
    purchase_id: Optional[str] = None
    session_type: SessionType = SessionType.ONE_ON_ONE
    location: Optional[str] = Field(default=None, max_length=255)
    client_notes: Optional[str] = None

    @field_validator("coach_id", "purchase_id")
    @classmethod
    def _canonical_uuid(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return str(UUID(str(value)))


class CancelSessionRequest(BaseModel):
    reason: Optional[str] = None


class RescheduleSessionRequest(TimeRange):
    session_date: date


class CompleteSessionRequest(BaseModel):
    coach_notes: Optional[str] = None
    exercises: list[Exercise] = Field(default_factory=list)


class SessionNotesRequest(BaseModel):
    coach_notes: Optional[str] = None
    exercises: Optional[list[Exercise]] = None


class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    client_id: str = Field(validation_alias="user_id")
    coach_id: str
    purchase_id: Optional[str] = None
    session_type: str
    session_date: date
    start_time: time
    end_time: time
    duration_minutes: int
    location: Optional[str] = None
    client_notes: Optional[str] = None
    status: str
    cancelled_by: Optional[str] = None
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    coach_notes: Optional[str] = None
    exercises_performed: Optional[list[dict[str, Any]]] = None
    completed_at: Optional[datetime] = None

    @field_serializer("start_time", "end_time")
    def _hhmm(self, value: time) -> str:
        return format_hhmm(value)


def session_to_dict(session: Any) -> dict[str, Any]:
    """JSON-safe snapshot of a TrainingSession (error details, webhook payloads)."""
    return SessionOut.model_validate(session).model_dump(mode="json")


class AvailableSlotsOut(BaseModel):
    coach_id: str
    date: date
    day_of_week: str
    available_slots: list[str]
    booked_slots: list[str]


class TopCoachOut(BaseModel):
    coach_id: str
    display_name: str
    session_count: int


class SessionStatsOut(BaseModel):
    total_sessions: int
    scheduled_sessions: int
    completed_sessions: int
    cancelled_sessions: int
    upcoming_sessions: int
    top_coaches: list[TopCoachOut]


class LedgerSummaryOut(BaseModel):
    purchase_id: str
    client_id: str
    package_name: str
    status: str
    expiry_date: date
    total_sessions: int
    sessions_remaining: int
    sessions_consumed: int
    committed_sessions: int
    balanced: bool
