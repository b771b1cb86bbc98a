"""Tests for best-effort lifecycle webhooks."""
import asyncio

import pytest
import requests
from fastapi import BackgroundTasks
from fastapi.testclient import TestClient

from coachbook.core.exceptions import SlotConflict
from coachbook.services import notification_service, session_service
from helpers import booking, hhmm
from main import app


class _Response:
    def __init__(self, status_code=200):
        self.status_code = status_code
        self.ok = status_code < 400


@pytest.fixture
def posted(monkeypatch, settings):
    settings.webhook_url = "https://hooks.example.com/coachbook"
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append({"url": url, "json": json, "timeout": timeout})
        return _Response()

    monkeypatch.setattr(notification_service.requests, "post", fake_post)
    return calls


def test_disabled_without_url(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("webhook should not be called")

    monkeypatch.setattr(notification_service.requests, "post", fail)
    assert notification_service.dispatch_session_event("session.booked", {"id": "x"}) is False


def test_booking_posts_session_snapshot(posted, coach, client_id, settings):
    session = session_service.book_session(booking(coach.id, "09:00", "10:00"), client_id)

    assert len(posted) == 1
    call = posted[0]
    assert call["url"] == settings.webhook_url
    assert call["timeout"] == settings.webhook_timeout_seconds
    assert call["json"]["event"] == notification_service.SESSION_BOOKED
    assert call["json"]["session"]["id"] == session.id
    assert call["json"]["session"]["start_time"] == "09:00"
    assert call["json"]["session"]["client_id"] == client_id


def test_each_transition_emits_its_event(posted, coach, client_id):
    a = session_service.book_session(booking(coach.id, "09:00", "10:00"), client_id)
    b = session_service.book_session(booking(coach.id, "10:00", "11:00"), client_id)
    session_service.reschedule_session(a.id, client_id, "user", a.session_date, hhmm("12:00"), hhmm("13:00"))
    session_service.complete_session(a.id, coach.user_id, "coach")
    session_service.cancel_session(b.id, client_id, "user")

    assert [c["json"]["event"] for c in posted] == [
        "session.booked",
        "session.booked",
        "session.rescheduled",
        "session.completed",
        "session.cancelled",
    ]


def test_failed_transition_sends_nothing(posted, coach, client_id):
    session_service.book_session(booking(coach.id, "09:00", "10:00"), client_id)
    with pytest.raises(SlotConflict):
        session_service.book_session(booking(coach.id, "09:30", "10:30"), client_id)
    assert len(posted) == 1


def test_unreachable_receiver_does_not_fail_booking(monkeypatch, settings, coach, client_id):
    settings.webhook_url = "https://hooks.example.com/coachbook"

    def down(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(notification_service.requests, "post", down)
    session = session_service.book_session(booking(coach.id, "09:00", "10:00"), client_id)
    assert session.status == "scheduled"
    assert session_service.get_session(session.id).status == "scheduled"


def test_rejected_delivery_reports_false(monkeypatch, settings):
    settings.webhook_url = "https://hooks.example.com/coachbook"
    monkeypatch.setattr(notification_service.requests, "post", lambda *a, **k: _Response(500))
    assert notification_service.dispatch_session_event("session.cancelled", {"id": "x"}) is False


def test_queued_event_waits_for_background_run(posted):
    tasks = BackgroundTasks()
    notification_service.schedule_session_event("session.booked", {"id": "x"}, tasks)
    assert posted == []

    asyncio.run(tasks())
    assert [c["json"]["event"] for c in posted] == ["session.booked"]


def test_api_booking_sends_webhook_as_background_task(posted, coach, client_id, monkeypatch):
    queues = []
    real_schedule = notification_service.schedule_session_event

    def recording_schedule(event_type, session, background_tasks=None):
        queues.append(background_tasks)
        real_schedule(event_type, session, background_tasks)

    monkeypatch.setattr(notification_service, "schedule_session_event", recording_schedule)
    body = {"coach_id": coach.id, "session_date": "2024-06-10", "start_time": "09:00", "end_time": "10:00"}
    r = TestClient(app).post("/sessions/book", json=body, headers={"X-Actor-Id": client_id})

    assert r.status_code == 201
    assert len(queues) == 1 and queues[0] is not None
    assert [c["json"]["session"]["id"] for c in posted] == [r.json()["id"]]
