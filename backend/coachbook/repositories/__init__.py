from coachbook.repositories.coach_repo import (
    bump_calendar_version,
    get_coach,
    get_coach_by_user,
    increment_total_sessions,
)
from coachbook.repositories.purchase_repo import (
    decrement_remaining,
    get_purchase,
    increment_remaining,
)
from coachbook.repositories.session_repo import (
    count_committed_for_purchase,
    find_overlapping_session,
    get_session,
    list_sessions,
    scheduled_sessions_for_day,
)
from coachbook.repositories.stats_repo import (
    count_sessions_by_status,
    count_upcoming_sessions,
    top_coaches_by_sessions,
)

__all__ = [
    "bump_calendar_version",
    "count_committed_for_purchase",
    "count_sessions_by_status",
    "count_upcoming_sessions",
    "decrement_remaining",
    "find_overlapping_session",
    "get_coach",
    "get_coach_by_user",
    "get_purchase",
    "get_session",
    "increment_remaining",
    "increment_total_sessions",
    "list_sessions",
    "scheduled_sessions_for_day",
    "top_coaches_by_sessions",
]
