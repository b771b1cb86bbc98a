"""Training session: one client/coach engagement on a date, with lifecycle metadata."""
from __future__ import annotations

import enum
from datetime import date, datetime, time

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    Uuid,
    func,
    literal_column,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, ExcludeConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coachbook.db.session import Base
from coachbook.models.base import TimestampMixin, UUIDPrimaryKeyMixin


class SessionStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class SessionType(str, enum.Enum):
    ONE_ON_ONE = "one_on_one"
    GROUP = "group"


class CancelledBy(str, enum.Enum):
    USER = "user"
    COACH = "coach"
    ADMIN = "admin"


class TrainingSession(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "training_sessions"
    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_session_time_order"),
        Index("ix_training_sessions_coach_day", "coach_id", "session_date", "status"),
    )

    # Client who booked the session
    user_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    coach_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("coaches.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    purchase_id: Mapped[str | None] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("package_purchases.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )

    session_type: Mapped[str] = mapped_column(String(20), nullable=False, default=SessionType.ONE_ON_ONE.value)
    session_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    client_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=SessionStatus.SCHEDULED.value)

    # Set only on transition to cancelled
    cancelled_by: Mapped[str | None] = mapped_column(String(20), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Set only on transition to completed (notes may be amended afterwards by the coach)
    coach_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    exercises_performed: Mapped[list | None] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    client: Mapped["User"] = relationship("User", back_populates="sessions", foreign_keys=[user_id])
    coach: Mapped["Coach"] = relationship("Coach", back_populates="sessions")
    purchase: Mapped["PackagePurchase | None"] = relationship("PackagePurchase", back_populates="sessions")

    @property
    def is_scheduled(self) -> bool:
        return self.status == SessionStatus.SCHEDULED.value

    def interval_label(self) -> str:
        return f"{self.start_time:%H:%M}-{self.end_time:%H:%M}"


_sessions = TrainingSession.__table__

# Mirrors migrations/002_no_overlap.sql (needs the btree_gist extension); Postgres only
_sessions.append_constraint(
    ExcludeConstraint(
        (_sessions.c.coach_id, "="),
        (
            func.tsrange(
                _sessions.c.session_date + _sessions.c.start_time,
                _sessions.c.session_date + _sessions.c.end_time,
                literal_column("'[)'"),
            ),
            "&&",
        ),
        name="training_sessions_no_overlap",
        using="gist",
        where=text("status = 'scheduled'"),
    ).ddl_if(dialect="postgresql")
)
