"""
Best-effort lifecycle webhooks.

Called only after the unit of work has committed. From the API the POST runs as
a FastAPI background task after the response is sent. Delivery problems are
logged and dropped: a booking never fails because the webhook receiver is down.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import requests
from fastapi import BackgroundTasks

from coachbook.core.config import get_settings

logger = logging.getLogger(__name__)

SESSION_BOOKED = "session.booked"
SESSION_CANCELLED = "session.cancelled"
SESSION_RESCHEDULED = "session.rescheduled"
SESSION_COMPLETED = "session.completed"


def dispatch_session_event(event_type: str, session: dict[str, Any]) -> bool:
    """POST {event, occurred_at, session} to the configured webhook; True if accepted."""
    settings = get_settings()
    if not settings.webhook_url:
        return False
    payload = {
        "event": event_type,
        "occurred_at": datetime.now(timezone.utc).isoformat(),
        "session": session,
    }
    try:
        r = requests.post(settings.webhook_url, json=payload, timeout=settings.webhook_timeout_seconds)
    except requests.RequestException as e:
        logger.warning("Webhook %s for session %s failed: %s", event_type, session.get("id"), e)
        return False
    if not r.ok:
        logger.warning(
            "Webhook %s for session %s returned %s", event_type, session.get("id"), r.status_code
        )
        return False
    return True


def schedule_session_event(
    event_type: str,
    session: dict[str, Any],
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    """Queue the webhook to run after the response is sent; without a task queue, send it now."""
    if background_tasks is not None:
        background_tasks.add_task(dispatch_session_event, event_type, session)
        return
    dispatch_session_event(event_type, session)
