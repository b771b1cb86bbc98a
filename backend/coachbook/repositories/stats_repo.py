"""Statistics repository: status rollups and top coaches by session count."""
from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import func, select, text
from sqlalchemy.orm import Session

from coachbook.models import Coach, TrainingSession
from coachbook.repositories.queries import (
    SQL_SESSION_STATUS_COUNTS,
    SQL_UPCOMING_SESSIONS_COUNT,
)


def count_sessions_by_status(db: Session) -> dict[str, int]:
    rows = db.execute(text(SQL_SESSION_STATUS_COUNTS)).fetchall()
    return {r[0]: int(r[1]) for r in rows}


def count_upcoming_sessions(db: Session, today: date) -> int:
    row = db.execute(text(SQL_UPCOMING_SESSIONS_COUNT), {"today": today.isoformat()}).fetchone()
    return int(row[0]) if row else 0


def top_coaches_by_sessions(db: Session, limit: int = 5) -> list[dict[str, Any]]:
    """Coaches with the most sessions of any status; ties broken by coach id."""
    session_count = func.count(TrainingSession.id).label("session_count")
    stmt = (
        select(Coach.id, Coach.display_name, session_count)
        .join(TrainingSession, TrainingSession.coach_id == Coach.id)
        .group_by(Coach.id, Coach.display_name)
        .order_by(session_count.desc(), Coach.id)
        .limit(limit)
    )
    return [
        {
            "coach_id": str(r[0]),
            "display_name": r[1],
            "session_count": int(r[2]),
        }
        for r in db.execute(stmt).all()
    ]
