"""
SQL for the read-only statistics rollups.
Portable between Postgres and SQLite; use with parameter binding.
"""

# ---------------------------------------------------------------------------
# 1) Session counts per status (missing statuses are reported as 0 by caller)
# ---------------------------------------------------------------------------
SQL_SESSION_STATUS_COUNTS = """
SELECT status, COUNT(*) AS session_count
FROM training_sessions
GROUP BY status;
"""

# ---------------------------------------------------------------------------
# 2) Upcoming sessions: still scheduled, on or after :today (ISO date string)
# ---------------------------------------------------------------------------
SQL_UPCOMING_SESSIONS_COUNT = """
SELECT COUNT(*)
FROM training_sessions
WHERE status = 'scheduled'
  AND session_date >= :today;
"""
