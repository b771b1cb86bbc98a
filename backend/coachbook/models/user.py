"""User entity: clients, coaches and staff share one identity table (managed externally)."""
from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coachbook.db.session import Base
from coachbook.models.base import TimestampMixin, UUIDPrimaryKeyMixin


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # user | coach | admin | staff | semi_admin; resolved by the auth layer, opaque here
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="user")

    sessions: Mapped[list] = relationship(
        "TrainingSession",
        back_populates="client",
        foreign_keys="TrainingSession.user_id",
    )
    purchases: Mapped[list] = relationship("PackagePurchase", back_populates="client")
