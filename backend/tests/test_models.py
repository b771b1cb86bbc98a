"""Schema checks for the booking tables."""
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.schema import CreateTable

from coachbook.models import TrainingSession


def _ddl(dialect) -> str:
    return str(CreateTable(TrainingSession.__table__).compile(dialect=dialect))


def test_postgres_ddl_carries_no_overlap_exclusion():
    ddl = _ddl(postgresql.dialect())
    assert "CONSTRAINT training_sessions_no_overlap EXCLUDE USING gist" in ddl
    assert "coach_id WITH =" in ddl
    assert "tsrange(" in ddl and "'[)'" in ddl
    assert "WHERE (status = 'scheduled')" in ddl


def test_exclusion_is_postgres_only():
    ddl = _ddl(sqlite.dialect())
    assert "EXCLUDE" not in ddl
    assert "ck_session_time_order" in ddl
