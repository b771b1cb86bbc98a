"""
Entitlement ledger: validation and the two counter moves (consume, refund).

consume/refund take the caller's session and never commit; they are only
called from the session lifecycle unit of work so a counter change always
lands together with the session change that caused it.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from sqlalchemy.orm import Session

from coachbook.core.exceptions import Depleted, Expired, NotActive, NotFound, Unauthorized
from coachbook.db.session import get_db
from coachbook.models import PackagePurchase, PurchaseStatus
from coachbook.repositories import (
    count_committed_for_purchase,
    decrement_remaining,
    get_purchase,
    increment_remaining,
)

logger = logging.getLogger(__name__)


def validate_for_consumption(
    db: Session,
    purchase_id: str,
    client_id: str,
    today: Optional[date] = None,
) -> PackagePurchase:
    """
    Check a purchase can back a new booking, locking its row for the rest of
    the transaction. Checks run in a fixed order: NotFound, Unauthorized,
    NotActive, Depleted, Expired.
    """
    today = today or date.today()
    purchase = get_purchase(db, purchase_id, for_update=True)
    if purchase is None:
        raise NotFound("Package purchase", purchase_id)
    if purchase.user_id != client_id:
        raise Unauthorized(
            "Unauthorized access to package",
            details={"purchase_id": str(purchase_id)},
        )
    if purchase.status != PurchaseStatus.ACTIVE.value:
        raise NotActive(purchase_id, purchase.status)
    if purchase.sessions_remaining <= 0:
        raise Depleted(purchase_id)
    if purchase.expiry_date < today:
        raise Expired(purchase_id, purchase.expiry_date)
    return purchase


def consume(db: Session, purchase_id: str) -> None:
    """Take one unit; the remaining > 0 guard is re-applied by the UPDATE itself."""
    if decrement_remaining(db, purchase_id) == 0:
        raise Depleted(purchase_id)
    logger.info("Consumed one session from purchase %s", purchase_id)


def refund(db: Session, purchase_id: str) -> None:
    """Return one unit, never above total_sessions."""
    if increment_remaining(db, purchase_id) == 0:
        # Unpaired refund: the counter is already at total (or the row is gone)
        logger.warning("Refund for purchase %s skipped: balance already at total", purchase_id)
        return
    logger.info("Refunded one session to purchase %s", purchase_id)


def ledger_summary(purchase_id: str) -> dict[str, Any]:
    """
    Read-only balance view. balanced is True when total - remaining equals the
    number of scheduled or completed sessions still referencing the purchase.
    """
    with get_db() as db:
        purchase = get_purchase(db, purchase_id)
        if purchase is None:
            raise NotFound("Package purchase", purchase_id)
        committed = count_committed_for_purchase(db, purchase_id)
        consumed = purchase.total_sessions - purchase.sessions_remaining
        return {
            "purchase_id": str(purchase.id),
            "client_id": str(purchase.user_id),
            "package_name": purchase.package_name,
            "status": purchase.status,
            "expiry_date": purchase.expiry_date,
            "total_sessions": purchase.total_sessions,
            "sessions_remaining": purchase.sessions_remaining,
            "sessions_consumed": consumed,
            "committed_sessions": committed,
            "balanced": consumed == committed,
        }
