"""SQLAlchemy models only; no business logic."""
from coachbook.models.base import TimestampMixin, UUIDPrimaryKeyMixin
from coachbook.models.coach import Coach
from coachbook.models.package_purchase import PackagePurchase, PurchaseStatus
from coachbook.models.training_session import (
    CancelledBy,
    SessionStatus,
    SessionType,
    TrainingSession,
)
from coachbook.models.user import User

__all__ = [
    "CancelledBy",
    "Coach",
    "PackagePurchase",
    "PurchaseStatus",
    "SessionStatus",
    "SessionType",
    "TimestampMixin",
    "TrainingSession",
    "User",
    "UUIDPrimaryKeyMixin",
]
