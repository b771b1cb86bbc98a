"""
Session lifecycle: book, cancel, reschedule, complete.

State machine: scheduled -> cancelled | completed (terminal); reschedule keeps
a session scheduled and replaces its times. Each transition runs inside one
run_atomic() unit: the conflict check, the session write and the ledger move
commit together or not at all. Webhooks go out only after commit.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from coachbook.core.config import get_settings
from coachbook.core.exceptions import CoachUnavailable, InvalidTransition, NotFound, Unauthorized
from coachbook.db.session import get_db
from coachbook.db.unit_of_work import run_atomic
from coachbook.models import CancelledBy, Coach, SessionStatus, TrainingSession
from coachbook.repositories import (
    bump_calendar_version,
    get_coach,
    get_coach_by_user,
    increment_total_sessions,
)
from coachbook.repositories import get_session as fetch_session
from coachbook.repositories import list_sessions as query_sessions
from coachbook.schemas.sessions import BookSessionRequest, Exercise, session_to_dict
from coachbook.services import notification_service as notifications
from coachbook.services.conflict_service import ensure_slot_free
from coachbook.services.ledger_service import consume, refund, validate_for_consumption
from coachbook.services.timeslots import duration_minutes

logger = logging.getLogger(__name__)


def _is_admin(actor_role: Optional[str]) -> bool:
    return bool(actor_role) and actor_role in get_settings().admin_roles_set()


def _load_for_transition(db: Session, session_id: str) -> tuple[TrainingSession, Coach]:
    session = fetch_session(db, session_id, for_update=True)
    if session is None:
        raise NotFound("Session", session_id)
    return session, session.coach


def _require_party(session: TrainingSession, coach: Coach, actor_id: str, actor_role: Optional[str]) -> str:
    """Client, the session's coach, or an admin; returns who matched (cancelled_by value)."""
    if session.user_id == actor_id:
        return CancelledBy.USER.value
    if coach.user_id == actor_id:
        return CancelledBy.COACH.value
    if _is_admin(actor_role):
        return CancelledBy.ADMIN.value
    raise Unauthorized(details={"session_id": str(session.id)})


def _require_coach_or_admin(session: TrainingSession, coach: Coach, actor_id: str, actor_role: Optional[str]) -> None:
    if coach.user_id != actor_id and not _is_admin(actor_role):
        raise Unauthorized(details={"session_id": str(session.id)})


def _exercise_records(exercises: Optional[list[Any]]) -> Optional[list[dict[str, Any]]]:
    if exercises is None:
        return None
    return [Exercise.model_validate(e).model_dump(exclude_none=True) for e in exercises]


def book_session(
    request: BookSessionRequest,
    acting_client_id: str,
    today: Optional[date] = None,
    background_tasks: Optional[BackgroundTasks] = None,
) -> TrainingSession:
    """
    Book a scheduled session for acting_client_id.
    Raises CoachUnavailable, ledger errors (NotFound, Unauthorized, NotActive,
    Depleted, Expired) or SlotConflict; consumes one unit when purchase_id is set.
    """
    minutes = duration_minutes(request.start_time, request.end_time)

    def _book(db: Session) -> TrainingSession:
        # Lock and write the coach row: a concurrent booker waiting on the lock
        # then fails with a serialization error and re-checks on retry
        coach = get_coach(db, request.coach_id, for_update=True)
        if coach is None or not coach.is_active:
            raise CoachUnavailable(request.coach_id)
        bump_calendar_version(db, coach.id)
        if request.purchase_id:
            validate_for_consumption(db, request.purchase_id, acting_client_id, today=today)
        ensure_slot_free(db, coach.id, request.session_date, request.start_time, request.end_time)

        session = TrainingSession(
            user_id=acting_client_id,
            coach_id=coach.id,
            purchase_id=request.purchase_id or None,
            session_type=request.session_type.value,
            session_date=request.session_date,
            start_time=request.start_time,
            end_time=request.end_time,
            duration_minutes=minutes,
            location=request.location,
            client_notes=request.client_notes,
            status=SessionStatus.SCHEDULED.value,
        )
        db.add(session)
        db.flush()
        if request.purchase_id:
            consume(db, request.purchase_id)
        return session

    session = run_atomic(_book, "book_session")
    logger.info(
        "Booked session %s coach=%s date=%s %s purchase=%s",
        session.id,
        session.coach_id,
        session.session_date,
        session.interval_label(),
        session.purchase_id,
    )
    notifications.schedule_session_event(
        notifications.SESSION_BOOKED, session_to_dict(session), background_tasks
    )
    return session


def cancel_session(
    session_id: str,
    actor_id: str,
    actor_role: Optional[str],
    reason: Optional[str] = None,
    background_tasks: Optional[BackgroundTasks] = None,
) -> TrainingSession:
    """Cancel a scheduled session and, if purchase-backed, refund its unit in the same transaction."""

    def _cancel(db: Session) -> TrainingSession:
        session, coach = _load_for_transition(db, session_id)
        cancelled_by = _require_party(session, coach, actor_id, actor_role)
        if not session.is_scheduled:
            raise InvalidTransition("cancel", session.status)

        session.status = SessionStatus.CANCELLED.value
        session.cancelled_by = cancelled_by
        session.cancellation_reason = reason
        session.cancelled_at = datetime.now(timezone.utc)
        db.flush()
        if session.purchase_id:
            refund(db, session.purchase_id)
        return session

    session = run_atomic(_cancel, "cancel_session")
    logger.info("Cancelled session %s by %s", session.id, session.cancelled_by)
    notifications.schedule_session_event(
        notifications.SESSION_CANCELLED, session_to_dict(session), background_tasks
    )
    return session


def reschedule_session(
    session_id: str,
    actor_id: str,
    actor_role: Optional[str],
    new_date: date,
    new_start: time,
    new_end: time,
    background_tasks: Optional[BackgroundTasks] = None,
) -> TrainingSession:
    """Move a scheduled session to a new slot; the entitlement stays consumed."""
    minutes = duration_minutes(new_start, new_end)

    def _reschedule(db: Session) -> TrainingSession:
        session, coach = _load_for_transition(db, session_id)
        _require_party(session, coach, actor_id, actor_role)
        if not session.is_scheduled:
            raise InvalidTransition("reschedule", session.status)

        get_coach(db, coach.id, for_update=True)
        bump_calendar_version(db, coach.id)
        ensure_slot_free(db, coach.id, new_date, new_start, new_end, exclude_session_id=session.id)

        session.session_date = new_date
        session.start_time = new_start
        session.end_time = new_end
        session.duration_minutes = minutes
        db.flush()
        return session

    session = run_atomic(_reschedule, "reschedule_session")
    logger.info(
        "Rescheduled session %s to %s %s", session.id, session.session_date, session.interval_label()
    )
    notifications.schedule_session_event(
        notifications.SESSION_RESCHEDULED, session_to_dict(session), background_tasks
    )
    return session


def complete_session(
    session_id: str,
    actor_id: str,
    actor_role: Optional[str],
    coach_notes: Optional[str] = None,
    exercises: Optional[list[Any]] = None,
    background_tasks: Optional[BackgroundTasks] = None,
) -> TrainingSession:
    """Mark a scheduled session completed (coach or admin) and bump the coach's counter."""
    records = _exercise_records(exercises)

    def _complete(db: Session) -> TrainingSession:
        session, coach = _load_for_transition(db, session_id)
        _require_coach_or_admin(session, coach, actor_id, actor_role)
        if not session.is_scheduled:
            raise InvalidTransition("complete", session.status)

        session.status = SessionStatus.COMPLETED.value
        session.coach_notes = coach_notes
        session.exercises_performed = records
        session.completed_at = datetime.now(timezone.utc)
        db.flush()
        increment_total_sessions(db, coach.id)
        return session

    session = run_atomic(_complete, "complete_session")
    logger.info("Completed session %s", session.id)
    notifications.schedule_session_event(
        notifications.SESSION_COMPLETED, session_to_dict(session), background_tasks
    )
    return session


def update_session_notes(
    session_id: str,
    actor_id: str,
    actor_role: Optional[str],
    coach_notes: Optional[str] = None,
    exercises: Optional[list[Any]] = None,
) -> TrainingSession:
    """
    Amend coach notes / exercises of a completed session; status and times untouched.
    Fields left as None keep their stored value. Scheduled sessions get their
    notes through complete_session, cancelled ones never.
    """
    records = _exercise_records(exercises)

    def _update(db: Session) -> TrainingSession:
        session, coach = _load_for_transition(db, session_id)
        _require_coach_or_admin(session, coach, actor_id, actor_role)
        if session.status != SessionStatus.COMPLETED.value:
            raise InvalidTransition(
                "update notes on",
                session.status,
                message="Can only update notes on completed sessions",
            )
        if coach_notes is not None:
            session.coach_notes = coach_notes
        if records is not None:
            session.exercises_performed = records
        db.flush()
        return session

    return run_atomic(_update, "update_session_notes")


def get_session(session_id: str) -> TrainingSession:
    with get_db() as db:
        session = fetch_session(db, session_id)
        if session is None:
            raise NotFound("Session", session_id)
        return session


def get_session_for_actor(session_id: str, actor_id: str, actor_role: Optional[str]) -> TrainingSession:
    """get_session restricted to the session's client, its coach, or an admin."""
    with get_db() as db:
        session = fetch_session(db, session_id)
        if session is None:
            raise NotFound("Session", session_id)
        _require_party(session, session.coach, actor_id, actor_role)
        return session


def list_sessions(
    client_id: Optional[str] = None,
    coach_id: Optional[str] = None,
    status: Optional[str] = None,
    on_date: Optional[date] = None,
    upcoming: bool = False,
    today: Optional[date] = None,
    newest_first: bool = True,
) -> list[TrainingSession]:
    """Filtered listing, latest date first by default; upcoming=True means scheduled on or after today."""
    upcoming_from = (today or date.today()) if upcoming else None
    with get_db() as db:
        return query_sessions(
            db,
            client_id=client_id,
            coach_id=coach_id,
            status=status,
            on_date=on_date,
            upcoming_from=upcoming_from,
            newest_first=newest_first,
        )


def list_coach_sessions(
    coach_user_id: str,
    status: Optional[str] = None,
    on_date: Optional[date] = None,
    upcoming: bool = False,
    today: Optional[date] = None,
) -> list[TrainingSession]:
    """Calendar of the coach profile owned by coach_user_id, earliest first; empty if there is none."""
    with get_db() as db:
        coach = get_coach_by_user(db, coach_user_id)
    if coach is None:
        return []
    return list_sessions(
        coach_id=coach.id,
        status=status,
        on_date=on_date,
        upcoming=upcoming,
        today=today,
        newest_first=False,
    )
