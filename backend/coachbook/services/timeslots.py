"""
Wall-clock helpers shared by the conflict checker and the availability resolver.
Intervals are half-open [start, end): touching intervals do not overlap.
"""
from __future__ import annotations

from datetime import date, datetime, time

from coachbook.core.exceptions import InvalidTimeRange

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def parse_hhmm(value: str) -> time:
    """Parse "HH:MM" (24h) into a time; raises ValueError on anything else."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def parse_interval(value: str) -> tuple[time, time]:
    """Parse "HH:MM-HH:MM"; start must be strictly before end."""
    start_s, sep, end_s = value.partition("-")
    if not sep:
        raise ValueError(f"Interval {value!r} is not HH:MM-HH:MM")
    start, end = parse_hhmm(start_s), parse_hhmm(end_s)
    if start >= end:
        raise ValueError(f"Interval {value!r} does not end after it starts")
    return start, end


def format_interval(start: time, end: time) -> str:
    return f"{format_hhmm(start)}-{format_hhmm(end)}"


def intervals_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    return start_a < end_b and end_a > start_b


def validate_time_range(start: time, end: time) -> None:
    if start >= end:
        raise InvalidTimeRange(
            "Start time must be before end time",
            details={"start_time": format_hhmm(start), "end_time": format_hhmm(end)},
        )


def duration_minutes(start: time, end: time) -> int:
    validate_time_range(start, end)
    return (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)


def weekday_name(day: date) -> str:
    return WEEKDAYS[day.weekday()]
