"""Coach entity: weekly availability template and lifetime completed-session counter."""
from __future__ import annotations

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coachbook.db.session import Base
from coachbook.models.base import TimestampMixin, UUIDPrimaryKeyMixin


class Coach(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "coaches"

    # The coach's own login identity; matched against actor ids for authorization
    user_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="RESTRICT"),
        unique=True,
        nullable=False,
        index=True,
    )
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # {"monday": ["09:00-10:00", "10:00-11:00"], ...}; written by the coach-profile service
    availability: Mapped[dict] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=dict,
    )
    total_sessions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Bumped by every transaction that adds or moves a scheduled session of this coach
    calendar_version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    user: Mapped["User"] = relationship("User")
    sessions: Mapped[list] = relationship("TrainingSession", back_populates="coach")
