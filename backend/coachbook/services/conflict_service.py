"""
Calendar conflict checker: does a proposed interval collide with a coach's
scheduled sessions on that date? Read-only; callers decide what to do.
"""
from __future__ import annotations

from datetime import date, time
from typing import Optional

from sqlalchemy.orm import Session

from coachbook.core.exceptions import SlotConflict
from coachbook.models import TrainingSession
from coachbook.repositories import find_overlapping_session
from coachbook.schemas.sessions import session_to_dict
from coachbook.services.timeslots import validate_time_range


def find_conflict(
    db: Session,
    coach_id: str,
    day: date,
    start: time,
    end: time,
    exclude_session_id: Optional[str] = None,
) -> TrainingSession | None:
    """
    Return the first scheduled session of coach_id on day overlapping [start, end).
    Touching intervals (existing.end == start) are not conflicts; exact duplicates are.
    exclude_session_id skips the session being rescheduled.
    """
    validate_time_range(start, end)
    return find_overlapping_session(db, coach_id, day, start, end, exclude_session_id)


def has_conflict(
    db: Session,
    coach_id: str,
    day: date,
    start: time,
    end: time,
    exclude_session_id: Optional[str] = None,
) -> bool:
    return find_conflict(db, coach_id, day, start, end, exclude_session_id) is not None


def ensure_slot_free(
    db: Session,
    coach_id: str,
    day: date,
    start: time,
    end: time,
    exclude_session_id: Optional[str] = None,
) -> None:
    """Raise SlotConflict carrying the colliding session, if any."""
    conflict = find_conflict(db, coach_id, day, start, end, exclude_session_id)
    if conflict is not None:
        raise SlotConflict(session_to_dict(conflict))
