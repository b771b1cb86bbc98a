"""Small builders shared by the test modules."""
from __future__ import annotations

from datetime import date, time
from typing import Optional

from coachbook.db.session import get_db
from coachbook.models import PackagePurchase, TrainingSession
from coachbook.schemas.sessions import BookSessionRequest

SCENARIO_DAY = date(2024, 6, 10)


def booking(
    coach_id: str,
    start: str,
    end: str,
    day: date = SCENARIO_DAY,
    purchase_id: Optional[str] = None,
    **extra,
) -> BookSessionRequest:
    return BookSessionRequest(
        coach_id=coach_id,
        session_date=day,
        start_time=start,
        end_time=end,
        purchase_id=purchase_id,
        **extra,
    )


def remaining(purchase_id: str) -> int:
    with get_db() as db:
        return db.get(PackagePurchase, purchase_id).sessions_remaining


def stored_session(session_id: str) -> TrainingSession:
    with get_db() as db:
        return db.get(TrainingSession, session_id)


def hhmm(value: str) -> time:
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))
