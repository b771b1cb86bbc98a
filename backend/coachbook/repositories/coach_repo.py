"""Coach repository: registry lookups, calendar write marker and the completed-session counter."""
from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from coachbook.models import Coach


def get_coach(db: Session, coach_id: str, for_update: bool = False) -> Coach | None:
    """
    Fetch a coach. for_update=True locks the row; calendar writers also call
    bump_calendar_version so the lock holder's commit invalidates a waiting
    REPEATABLE READ transaction instead of leaving it on a stale snapshot.
    """
    stmt = select(Coach).where(Coach.id == coach_id)
    if for_update:
        stmt = stmt.with_for_update()
    return db.execute(stmt).scalar_one_or_none()


def get_coach_by_user(db: Session, user_id: str) -> Coach | None:
    return db.execute(select(Coach).where(Coach.user_id == user_id)).scalar_one_or_none()


def increment_total_sessions(db: Session, coach_id: str) -> None:
    db.execute(
        update(Coach)
        .where(Coach.id == coach_id)
        .values(total_sessions=Coach.total_sessions + 1)
        .execution_options(synchronize_session=False)
    )


def bump_calendar_version(db: Session, coach_id: str) -> None:
    """Write the locked coach row so a concurrent calendar writer fails serialization and retries."""
    db.execute(
        update(Coach)
        .where(Coach.id == coach_id)
        .values(calendar_version=Coach.calendar_version + 1)
        .execution_options(synchronize_session=False)
    )
