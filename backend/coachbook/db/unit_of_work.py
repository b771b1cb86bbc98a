"""
Atomic unit of work for lifecycle operations.

The callable receives the SQLAlchemy session and must do all of its reads,
checks and writes through it; get_db() commits once at the end or rolls
everything back. Serialization failures, deadlocks and overlap-constraint
violations are retried with the callable re-run from scratch, so every
check is re-evaluated against the state the retry actually sees.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from coachbook.core.config import get_settings
from coachbook.core.exceptions import TransientFailure
from coachbook.db.session import get_db

logger = logging.getLogger(__name__)

T = TypeVar("T")

# serialization_failure, deadlock_detected, exclusion_violation
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01", "23P01"})


def is_retryable_store_error(exc: DBAPIError) -> bool:
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode in RETRYABLE_SQLSTATES:
        return True
    message = str(exc).lower()
    return "deadlock detected" in message or "could not serialize access" in message


def run_atomic(work: Callable[[Session], T], label: str, retries: Optional[int] = None) -> T:
    """Run work(db) in one transaction; retry retryable store failures, then raise TransientFailure."""
    if retries is None:
        retries = get_settings().transaction_retries
    attempt = 0
    while True:
        attempt += 1
        try:
            with get_db() as db:
                return work(db)
        except DBAPIError as exc:
            if not is_retryable_store_error(exc):
                raise
            if attempt > retries:
                logger.error("%s: store rejected transaction after %d attempts: %s", label, attempt, exc)
                raise TransientFailure(label) from exc
            logger.warning("%s: retrying after retryable store error (attempt %d): %s", label, attempt, exc)
