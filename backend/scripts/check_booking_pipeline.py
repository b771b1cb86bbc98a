#!/usr/bin/env python3
"""
End-to-end check of the booking core against a real Postgres database.

Run from the backend directory after migrations:
  python scripts/run_migrations.py
  python scripts/check_booking_pipeline.py

Creates throwaway users/coaches/purchases (prefixed, far-future dates) and
walks through booking, conflict, ledger, cancellation, reschedule and
completion, asserting the ledger stays balanced throughout.
"""
from __future__ import annotations

import os
import sys
import uuid
from datetime import date, time, timedelta

# Ensure backend is on path so coachbook is importable (whether run as script or from repo root)
_script_dir = os.path.dirname(os.path.abspath(__file__))
_backend = os.path.dirname(_script_dir)
if _backend not in sys.path:
    sys.path.insert(0, _backend)

from coachbook.core.exceptions import Depleted, InvalidTransition, SlotConflict
from coachbook.db.session import get_db
from coachbook.models import Coach, PackagePurchase, PurchaseStatus, User
from coachbook.schemas.sessions import BookSessionRequest
from coachbook.services import session_service
from coachbook.services.ledger_service import ledger_summary
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

TEST_PREFIX = "check-e2e-"


def _check_db() -> None:
    """Fail fast with a clear message if Postgres is not reachable."""
    try:
        with get_db() as db:
            db.execute(select(1))
    except OperationalError as e:
        print(
            "[FAIL] Cannot connect to Postgres.\n"
            "  1. Set DATABASE_URL in backend/.env.\n"
            "  2. Run migrations: python scripts/run_migrations.py\n"
            "  3. Run this script again.",
            file=sys.stderr,
        )
        raise SystemExit(1) from e


def _book(coach_id: str, client_id: str, day: date, start: str, end: str, purchase_id: str | None = None):
    return session_service.book_session(
        BookSessionRequest(
            coach_id=coach_id,
            session_date=day,
            start_time=start,
            end_time=end,
            purchase_id=purchase_id,
        ),
        client_id,
    )


def _run() -> None:
    _check_db()
    uid = str(uuid.uuid4())[:8]
    # Far future so real bookings never collide with the run
    day = date.today() + timedelta(days=3650 + int(uid, 16) % 365)

    # --- Create client, two coaches, and a one-session purchase ---
    with get_db() as db:
        client = User(email=f"{TEST_PREFIX}client-{uid}@example.com", display_name="Check Client")
        coach_user = User(email=f"{TEST_PREFIX}coach-{uid}@example.com", display_name="Check Coach", role="coach")
        other_user = User(email=f"{TEST_PREFIX}coach2-{uid}@example.com", display_name="Other Coach", role="coach")
        db.add_all([client, coach_user, other_user])
        db.flush()
        coach = Coach(user_id=coach_user.id, display_name="Check Coach", availability={})
        other = Coach(user_id=other_user.id, display_name="Other Coach", availability={})
        purchase = PackagePurchase(
            user_id=client.id,
            package_name=f"{TEST_PREFIX}single",
            total_sessions=1,
            sessions_remaining=1,
            expiry_date=day + timedelta(days=30),
            status=PurchaseStatus.ACTIVE.value,
        )
        db.add_all([coach, other, purchase])
        db.flush()
        client_id, coach_id, other_id = client.id, coach.id, other.id
        coach_user_id, purchase_id = coach_user.id, purchase.id

    # --- A) plain booking ---
    first = _book(coach_id, client_id, day, "09:00", "10:00")
    assert first.status == "scheduled" and first.duration_minutes == 60
    print("[PASS] A: booked 09:00-10:00, duration 60")

    # --- B) overlapping booking is rejected with the conflicting session ---
    try:
        _book(coach_id, client_id, day, "09:30", "10:30")
        raise AssertionError("expected SlotConflict")
    except SlotConflict as e:
        assert e.conflicting_session["id"] == first.id
    print("[PASS] B: overlap rejected, conflicting session reported")

    # --- C) purchase-backed booking consumes the last unit ---
    backed = _book(coach_id, client_id, day, "11:00", "12:00", purchase_id=purchase_id)
    assert ledger_summary(purchase_id)["sessions_remaining"] == 0
    try:
        _book(coach_id, client_id, day, "13:00", "14:00", purchase_id=purchase_id)
        raise AssertionError("expected Depleted")
    except Depleted:
        pass
    print("[PASS] C: purchase consumed, second booking depleted")

    # --- D) client cancellation refunds ---
    cancelled = session_service.cancel_session(backed.id, client_id, "user", "schedule clash")
    assert cancelled.status == "cancelled" and cancelled.cancelled_by == "user"
    summary = ledger_summary(purchase_id)
    assert summary["sessions_remaining"] == 1 and summary["balanced"]
    print("[PASS] D: cancel refunded the purchase, ledger balanced")

    # --- E) conflict check is per coach ---
    _book(other_id, client_id, day, "15:00", "16:00")
    moved = session_service.reschedule_session(
        first.id, client_id, "user", day, time(15, 0), time(16, 0)
    )
    assert moved.start_time == time(15, 0)
    print("[PASS] E: reschedule over another coach's slot allowed")

    # --- F) completed sessions cannot be cancelled ---
    session_service.complete_session(first.id, coach_user_id, "coach", "good work", [{"name": "squat"}])
    try:
        session_service.cancel_session(first.id, client_id, "user")
        raise AssertionError("expected InvalidTransition")
    except InvalidTransition:
        pass
    print("[PASS] F: cancel after complete rejected")

    print("\nAll assertions passed.")


def main() -> int:
    try:
        _run()
        return 0
    except Exception as e:
        print(f"\n[FAIL] {e}", file=sys.stderr)
        raise


if __name__ == "__main__":
    sys.exit(main())
