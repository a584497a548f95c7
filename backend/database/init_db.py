"""
Database bootstrap script.

Creates the organizer, building and events tables if they are missing and
then runs a quick check that the constraints the services rely on are in
place (unique organizer email, closed status set).

Usage:
    python -m backend.database.init_db
"""

import sys

from backend.database.db_connection import get_db

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS organizer (
    organizer_id   SERIAL PRIMARY KEY,
    organizer_name VARCHAR(255) NOT NULL,
    fname          VARCHAR(100) NOT NULL,
    lname          VARCHAR(100) NOT NULL,
    email          VARCHAR(255) NOT NULL,
    contact_no     VARCHAR(50),
    password_hash  TEXT NOT NULL,
    status         VARCHAR(20) NOT NULL DEFAULT 'pending',
    CONSTRAINT organizer_email_key UNIQUE (email),
    CONSTRAINT organizer_status_check CHECK (status IN ('pending', 'approved'))
);

CREATE TABLE IF NOT EXISTS building (
    building_id   SERIAL PRIMARY KEY,
    zone_id       INTEGER NOT NULL,
    building_name VARCHAR(255) NOT NULL,
    description   TEXT
);

CREATE TABLE IF NOT EXISTS events (
    event_id       SERIAL PRIMARY KEY,
    event_name     VARCHAR(255) NOT NULL,
    start_time     TIMESTAMPTZ NOT NULL,
    end_time       TIMESTAMPTZ NOT NULL,
    location       VARCHAR(255),
    description    TEXT,
    media_urls     TEXT[],
    event_category VARCHAR(100),
    organizer_id   INTEGER REFERENCES organizer(organizer_id) ON DELETE SET NULL,
    CONSTRAINT events_time_order CHECK (end_time > start_time)
);
"""

TABLES = ["organizer", "building", "events"]


def init_db() -> None:
    """
    Apply SCHEMA_SQL and verify every table exists afterwards.

    Raises:
        RuntimeError: If a table is still missing after the schema ran.
    """
    with get_db() as conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)

            missing = []
            for t in TABLES:
                cur.execute("SELECT to_regclass(%s);", (t,))
                if not cur.fetchone()[0]:
                    missing.append(t)
        conn.commit()

    if missing:
        raise RuntimeError(f"Tables missing after init: {', '.join(missing)}")


if __name__ == "__main__":
    print("--- Initializing database schema ---")
    try:
        init_db()
    except Exception as e:
        print(f"Database init FAILED: {e}")
        sys.exit(1)
    for t in TABLES:
        print(f" - {t}: Found")
    print("Database init complete.")
