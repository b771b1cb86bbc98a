"""Package purchase: prepaid session ledger with a single mutable counter."""
from __future__ import annotations

import enum
from datetime import date

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from coachbook.db.session import Base
from coachbook.models.base import TimestampMixin, UUIDPrimaryKeyMixin


class PurchaseStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"


class PackagePurchase(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "package_purchases"
    __table_args__ = (
        CheckConstraint("total_sessions >= 0", name="ck_purchase_total_non_negative"),
        CheckConstraint(
            "sessions_remaining >= 0 AND sessions_remaining <= total_sessions",
            name="ck_purchase_remaining_bounds",
        ),
    )

    user_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    package_name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_sessions: Mapped[int] = mapped_column(Integer, nullable=False)
    # Only the session lifecycle unit of work writes this column
    sessions_remaining: Mapped[int] = mapped_column(Integer, nullable=False)
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=PurchaseStatus.PENDING.value)

    client: Mapped["User"] = relationship("User", back_populates="purchases")
    sessions: Mapped[list] = relationship("TrainingSession", back_populates="purchase")
