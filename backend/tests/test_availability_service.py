"""Tests for the availability resolver."""
from datetime import date

import pytest

from coachbook.core.exceptions import NotFound
from coachbook.services import session_service
from coachbook.services.availability_service import available_slots, resolve_day
from helpers import SCENARIO_DAY, booking

MONDAY_TEMPLATE = {"monday": ["09:00-10:00", "10:00-11:00", "11:00-12:00", "14:00-15:00"]}


def test_unbooked_day_returns_template_in_order(make_coach):
    coach = make_coach(availability=MONDAY_TEMPLATE)
    assert available_slots(coach.id, SCENARIO_DAY) == MONDAY_TEMPLATE["monday"]


def test_booked_slots_are_removed(make_coach, client_id):
    coach = make_coach(availability=MONDAY_TEMPLATE)
    session_service.book_session(booking(coach.id, "10:30", "11:30"), client_id)

    day = resolve_day(coach.id, SCENARIO_DAY)
    assert day["available_slots"] == ["09:00-10:00", "14:00-15:00"]
    assert day["booked_slots"] == ["10:30-11:30"]
    assert day["day_of_week"] == "monday"
    assert day["date"] == SCENARIO_DAY


def test_touching_booking_keeps_neighbour_slot(make_coach, client_id):
    coach = make_coach(availability=MONDAY_TEMPLATE)
    session_service.book_session(booking(coach.id, "10:00", "11:00"), client_id)
    assert available_slots(coach.id, SCENARIO_DAY) == ["09:00-10:00", "11:00-12:00", "14:00-15:00"]


def test_cancelled_sessions_free_their_slot(make_coach, client_id):
    coach = make_coach(availability=MONDAY_TEMPLATE)
    session = session_service.book_session(booking(coach.id, "09:00", "10:00"), client_id)
    session_service.cancel_session(session.id, client_id, "user")
    assert available_slots(coach.id, SCENARIO_DAY) == MONDAY_TEMPLATE["monday"]


def test_weekday_without_template_is_empty(make_coach):
    coach = make_coach(availability=MONDAY_TEMPLATE)
    assert available_slots(coach.id, date(2024, 6, 11)) == []


def test_malformed_entries_are_skipped(make_coach):
    coach = make_coach(availability={"monday": ["09:00-10:00", "late morning", "12:00-11:00", "13:00-14:00"]})
    assert available_slots(coach.id, SCENARIO_DAY) == ["09:00-10:00", "13:00-14:00"]


def test_non_list_template_is_ignored(make_coach):
    coach = make_coach(availability={"monday": "09:00-10:00"})
    assert available_slots(coach.id, SCENARIO_DAY) == []


def test_inactive_coach_still_reports_template(make_coach):
    coach = make_coach(availability=MONDAY_TEMPLATE, is_active=False)
    assert available_slots(coach.id, SCENARIO_DAY) == MONDAY_TEMPLATE["monday"]


def test_unknown_coach():
    with pytest.raises(NotFound):
        resolve_day("00000000-0000-0000-0000-000000000000", SCENARIO_DAY)


def test_resolution_is_idempotent(make_coach, client_id):
    coach = make_coach(availability=MONDAY_TEMPLATE)
    session_service.book_session(booking(coach.id, "14:00", "15:00"), client_id)
    assert resolve_day(coach.id, SCENARIO_DAY) == resolve_day(coach.id, SCENARIO_DAY)
