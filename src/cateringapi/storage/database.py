"""SQLite database schema and connection management."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path

log = logging.getLogger(__name__)

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Physical addresses facilities are located at
CREATE TABLE IF NOT EXISTS locations (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    city          TEXT NOT NULL,
    address       TEXT NOT NULL,
    zip_code      TEXT NOT NULL,
    country_code  TEXT NOT NULL,
    phone_number  TEXT NOT NULL
);

-- Catering facilities
CREATE TABLE IF NOT EXISTS facilities (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    name           TEXT NOT NULL,
    creation_date  TEXT NOT NULL DEFAULT (date('now')),
    location_id    INTEGER NOT NULL REFERENCES locations(id)
);

-- Tags, unique by casefolded name (name_key)
CREATE TABLE IF NOT EXISTS tags (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    name      TEXT NOT NULL,
    name_key  TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS facility_tags (
    facility_id  INTEGER NOT NULL REFERENCES facilities(id) ON DELETE CASCADE,
    tag_id       INTEGER NOT NULL REFERENCES tags(id),
    PRIMARY KEY (facility_id, tag_id)
);

CREATE TABLE IF NOT EXISTS employees (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT NOT NULL,
    address     TEXT NOT NULL,
    phone       TEXT NOT NULL,
    email       TEXT NOT NULL UNIQUE COLLATE NOCASE,
    created_at  TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS employee_facilities (
    employee_id  INTEGER NOT NULL REFERENCES employees(id) ON DELETE CASCADE,
    facility_id  INTEGER NOT NULL REFERENCES facilities(id) ON DELETE CASCADE,
    PRIMARY KEY (employee_id, facility_id)
);

-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER NOT NULL
);

-- Indexes
CREATE INDEX IF NOT EXISTS idx_facilities_location ON facilities(location_id);
CREATE INDEX IF NOT EXISTS idx_facility_tags_tag ON facility_tags(tag_id);
CREATE INDEX IF NOT EXISTS idx_employee_facilities_facility ON employee_facilities(facility_id);
CREATE INDEX IF NOT EXISTS idx_locations_city ON locations(city);
"""

# Child tables first so deletes respect foreign keys
DATA_TABLES = (
    "employee_facilities",
    "facility_tags",
    "employees",
    "facilities",
    "tags",
    "locations",
)


class Database:
    """SQLite database connection manager."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            # FastAPI may run a request's sync helpers on another thread
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def initialize(self):
        """Create all tables if they don't exist."""
        self.conn.executescript(SCHEMA_SQL)
        row = self.conn.execute(
            "SELECT version FROM schema_version LIMIT 1"
        ).fetchone()
        if row is None:
            self.conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
        self.conn.commit()

    @contextmanager
    def transaction(self):
        """Commit the enclosed writes together, or roll all of them back."""
        try:
            yield self.conn
        except BaseException:
            self.conn.rollback()
            raise
        else:
            self.conn.commit()

    def table_counts(self) -> dict[str, int]:
        counts = {}
        for table in reversed(DATA_TABLES):
            row = self.conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
            counts[table] = row[0]
        return counts

    def clear(self):
        """Delete every row from the data tables."""
        with self.transaction() as conn:
            for table in DATA_TABLES:
                conn.execute(f"DELETE FROM {table}")
        log.info("Cleared all catering data")

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        self.initialize()
        return self

    def __exit__(self, *args):
        self.close()
