"""
Availability resolver: the coach's weekly template for a date minus the
template intervals already overlapped by scheduled sessions.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from coachbook.core.exceptions import NotFound
from coachbook.db.session import get_db
from coachbook.repositories import get_coach, scheduled_sessions_for_day
from coachbook.services.timeslots import format_interval, intervals_overlap, parse_interval, weekday_name

logger = logging.getLogger(__name__)


def _template_for_day(coach_id: str, availability: dict[str, Any] | None, day_name: str) -> list[str]:
    entries = (availability or {}).get(day_name) or []
    if not isinstance(entries, list):
        logger.warning("Coach %s: availability for %s is not a list, ignoring", coach_id, day_name)
        return []
    return entries


def resolve_day(coach_id: str, day: date) -> dict[str, Any]:
    """
    Free template slots for coach_id on day, plus the day's booked intervals.
    Template order is preserved; malformed template entries are skipped.
    """
    day_name = weekday_name(day)
    with get_db() as db:
        coach = get_coach(db, coach_id)
        if coach is None:
            raise NotFound("Coach", coach_id)
        template = _template_for_day(coach_id, coach.availability, day_name)
        booked = [(s.start_time, s.end_time) for s in scheduled_sessions_for_day(db, coach_id, day)]

    free: list[str] = []
    for entry in template:
        try:
            start, end = parse_interval(str(entry))
        except ValueError as e:
            logger.warning("Coach %s: skipping malformed availability entry %r: %s", coach_id, entry, e)
            continue
        if not any(intervals_overlap(start, end, b_start, b_end) for b_start, b_end in booked):
            free.append(format_interval(start, end))

    return {
        "coach_id": str(coach_id),
        "date": day,
        "day_of_week": day_name,
        "available_slots": free,
        "booked_slots": [format_interval(s, e) for s, e in booked],
    }


def available_slots(coach_id: str, day: date) -> list[str]:
    return resolve_day(coach_id, day)["available_slots"]
