"""Tests for run_atomic retry handling."""
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from coachbook.core.exceptions import TransientFailure
from coachbook.db.unit_of_work import is_retryable_store_error, run_atomic


class _DriverError(Exception):
    def __init__(self, pgcode, message="driver error"):
        super().__init__(message)
        self.pgcode = pgcode


def _store_error(pgcode, message="driver error"):
    return OperationalError("UPDATE coaches ...", {}, _DriverError(pgcode, message))


@pytest.mark.parametrize("pgcode", ["40001", "40P01", "23P01"])
def test_retryable_sqlstates(pgcode):
    assert is_retryable_store_error(_store_error(pgcode))


def test_deadlock_message_without_code_is_retryable():
    assert is_retryable_store_error(_store_error(None, "ERROR: deadlock detected"))


def test_unique_violation_is_not_retryable():
    assert not is_retryable_store_error(IntegrityError("INSERT ...", {}, _DriverError("23505")))


def test_retry_then_success():
    attempts = []

    def work(db):
        attempts.append(db)
        if len(attempts) == 1:
            raise _store_error("40001")
        return "ok"

    assert run_atomic(work, "test_op", retries=1) == "ok"
    assert len(attempts) == 2


def test_retries_exhausted_raise_transient_failure():
    attempts = []

    def work(db):
        attempts.append(db)
        raise _store_error("40P01")

    with pytest.raises(TransientFailure) as exc:
        run_atomic(work, "book_session", retries=2)
    assert len(attempts) == 3
    assert exc.value.details == {"operation": "book_session"}
    assert exc.value.status_code == 503


def test_retry_count_defaults_to_settings(settings):
    settings.transaction_retries = 0
    attempts = []

    def work(db):
        attempts.append(db)
        raise _store_error("40001")

    with pytest.raises(TransientFailure):
        run_atomic(work, "cancel_session")
    assert len(attempts) == 1


def test_non_retryable_error_propagates_unchanged():
    attempts = []

    def work(db):
        attempts.append(db)
        raise IntegrityError("INSERT ...", {}, _DriverError("23505"))

    with pytest.raises(IntegrityError):
        run_atomic(work, "book_session", retries=3)
    assert len(attempts) == 1
