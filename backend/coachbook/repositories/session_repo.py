"""Training session repository: lookups, filtered listings and calendar scans."""
from __future__ import annotations

from datetime import date, time
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from coachbook.models import SessionStatus, TrainingSession


def get_session(db: Session, session_id: str, for_update: bool = False) -> TrainingSession | None:
    stmt = select(TrainingSession).where(TrainingSession.id == session_id)
    if for_update:
        stmt = stmt.with_for_update()
    return db.execute(stmt).scalar_one_or_none()


def list_sessions(
    db: Session,
    client_id: Optional[str] = None,
    coach_id: Optional[str] = None,
    status: Optional[str] = None,
    on_date: Optional[date] = None,
    upcoming_from: Optional[date] = None,
    newest_first: bool = True,
) -> list[TrainingSession]:
    """
    Filtered session listing ordered by date, start time, id (stable across calls),
    descending unless newest_first=False. upcoming_from restricts to scheduled
    sessions on or after that date and overrides any status filter.
    """
    stmt = select(TrainingSession)
    if client_id:
        stmt = stmt.where(TrainingSession.user_id == client_id)
    if coach_id:
        stmt = stmt.where(TrainingSession.coach_id == coach_id)
    if upcoming_from is not None:
        stmt = stmt.where(
            TrainingSession.status == SessionStatus.SCHEDULED.value,
            TrainingSession.session_date >= upcoming_from,
        )
    elif status:
        stmt = stmt.where(TrainingSession.status == status)
    if on_date is not None:
        stmt = stmt.where(TrainingSession.session_date == on_date)
    order = [TrainingSession.session_date, TrainingSession.start_time, TrainingSession.id]
    if newest_first:
        order = [c.desc() for c in order]
    stmt = stmt.order_by(*order)
    return list(db.execute(stmt).scalars().all())


def scheduled_sessions_for_day(
    db: Session,
    coach_id: str,
    day: date,
    exclude_session_id: Optional[str] = None,
) -> list[TrainingSession]:
    """Scheduled sessions for one coach on one date, ordered by start time."""
    stmt = select(TrainingSession).where(
        TrainingSession.coach_id == coach_id,
        TrainingSession.session_date == day,
        TrainingSession.status == SessionStatus.SCHEDULED.value,
    )
    if exclude_session_id:
        stmt = stmt.where(TrainingSession.id != exclude_session_id)
    stmt = stmt.order_by(TrainingSession.start_time, TrainingSession.id)
    return list(db.execute(stmt).scalars().all())


def find_overlapping_session(
    db: Session,
    coach_id: str,
    day: date,
    start: time,
    end: time,
    exclude_session_id: Optional[str] = None,
) -> TrainingSession | None:
    """First scheduled session of the coach whose [start, end) overlaps the given one."""
    stmt = select(TrainingSession).where(
        TrainingSession.coach_id == coach_id,
        TrainingSession.session_date == day,
        TrainingSession.status == SessionStatus.SCHEDULED.value,
        TrainingSession.start_time < end,
        TrainingSession.end_time > start,
    )
    if exclude_session_id:
        stmt = stmt.where(TrainingSession.id != exclude_session_id)
    stmt = stmt.order_by(TrainingSession.start_time, TrainingSession.id).limit(1)
    return db.execute(stmt).scalars().first()


def count_committed_for_purchase(db: Session, purchase_id: str) -> int:
    """Sessions still holding an entitlement unit: scheduled or completed."""
    stmt = (
        select(func.count())
        .select_from(TrainingSession)
        .where(
            TrainingSession.purchase_id == purchase_id,
            TrainingSession.status.in_(
                [SessionStatus.SCHEDULED.value, SessionStatus.COMPLETED.value]
            ),
        )
    )
    return int(db.execute(stmt).scalar() or 0)
