"""Package purchase repository: row lookup and conditional counter updates."""
from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from coachbook.models import PackagePurchase


def get_purchase(db: Session, purchase_id: str, for_update: bool = False) -> PackagePurchase | None:
    stmt = select(PackagePurchase).where(PackagePurchase.id == purchase_id)
    if for_update:
        stmt = stmt.with_for_update()
    return db.execute(stmt).scalar_one_or_none()


def decrement_remaining(db: Session, purchase_id: str) -> int:
    """
    remaining -= 1 only while remaining > 0, evaluated by the store at execution time.
    Returns the number of rows changed (0 means the purchase was already depleted).
    """
    result = db.execute(
        update(PackagePurchase)
        .where(
            PackagePurchase.id == purchase_id,
            PackagePurchase.sessions_remaining > 0,
        )
        .values(sessions_remaining=PackagePurchase.sessions_remaining - 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def increment_remaining(db: Session, purchase_id: str) -> int:
    """remaining += 1 capped at total_sessions; returns rows changed."""
    result = db.execute(
        update(PackagePurchase)
        .where(
            PackagePurchase.id == purchase_id,
            PackagePurchase.sessions_remaining < PackagePurchase.total_sessions,
        )
        .values(sessions_remaining=PackagePurchase.sessions_remaining + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount
