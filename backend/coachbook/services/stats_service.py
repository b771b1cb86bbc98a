"""Read-only session rollups for the admin overview."""
from __future__ import annotations

from datetime import date
from typing import Any, Optional

from coachbook.core.config import get_settings
from coachbook.db.session import get_db
from coachbook.models import SessionStatus
from coachbook.repositories import (
    count_sessions_by_status,
    count_upcoming_sessions,
    top_coaches_by_sessions,
)


def session_stats(today: Optional[date] = None, top_n: Optional[int] = None) -> dict[str, Any]:
    today = today or date.today()
    limit = top_n if top_n is not None else get_settings().top_coaches_limit
    with get_db() as db:
        by_status = count_sessions_by_status(db)
        upcoming = count_upcoming_sessions(db, today)
        top = top_coaches_by_sessions(db, limit=limit)
    return {
        "total_sessions": sum(by_status.values()),
        "scheduled_sessions": by_status.get(SessionStatus.SCHEDULED.value, 0),
        "completed_sessions": by_status.get(SessionStatus.COMPLETED.value, 0),
        "cancelled_sessions": by_status.get(SessionStatus.CANCELLED.value, 0),
        "upcoming_sessions": upcoming,
        "top_coaches": top,
    }
