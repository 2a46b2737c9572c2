"""Tests for cateringapi.storage.database and seed data."""

from __future__ import annotations

import sqlite3

import pytest

from cateringapi.storage.database import DATA_TABLES, Database
from cateringapi.storage.seed import has_data, seed


class TestDatabase:
    def test_context_manager_creates_tables(self, tmp_path):
        with Database(tmp_path / "test.db") as db:
            tables = db.conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            ).fetchall()
            names = {r[0] for r in tables}
        assert set(DATA_TABLES) <= names
        assert "schema_version" in names

    def test_creates_parent_directories(self, tmp_path):
        db_path = tmp_path / "deep" / "nested" / "test.db"
        with Database(db_path):
            assert db_path.parent.is_dir()

    def test_initialize_is_idempotent(self, tmp_path):
        db_path = tmp_path / "test.db"
        with Database(db_path):
            pass
        with Database(db_path) as db:
            rows = db.conn.execute("SELECT version FROM schema_version").fetchall()
        assert len(rows) == 1

    def test_foreign_keys_enforced(self, tmp_db):
        with pytest.raises(sqlite3.IntegrityError):
            tmp_db.conn.execute(
                "INSERT INTO facilities (name, location_id) VALUES ('Orphan', 999)"
            )

    def test_transaction_rolls_back(self, tmp_db):
        with pytest.raises(RuntimeError):
            with tmp_db.transaction() as conn:
                conn.execute("INSERT INTO tags (name, name_key) VALUES ('Temp', 'temp')")
                raise RuntimeError("boom")
        assert tmp_db.table_counts()["tags"] == 0

    def test_tag_name_keys_unique(self, tmp_db):
        tmp_db.conn.execute("INSERT INTO tags (name, name_key) VALUES ('Wedding', 'wedding')")
        with pytest.raises(sqlite3.IntegrityError):
            tmp_db.conn.execute(
                "INSERT INTO tags (name, name_key) VALUES ('WEDDING', 'wedding')"
            )


class TestSeed:
    def test_seed_and_clear(self, tmp_db):
        assert not has_data(tmp_db)
        counts = seed(tmp_db)
        assert tmp_db.table_counts() == counts
        assert has_data(tmp_db)

        tmp_db.clear()
        assert not has_data(tmp_db)

    def test_seeded_facility_tags(self, tmp_db):
        seed(tmp_db)
        row = tmp_db.conn.execute(
            """SELECT GROUP_CONCAT(t.name) AS tags
               FROM facilities f
               JOIN facility_tags ft ON ft.facility_id = f.id
               JOIN tags t ON t.id = ft.tag_id
               WHERE f.name = 'Amsterdam Grand Catering'"""
        ).fetchone()
        assert set(row["tags"].split(",")) == {"Wedding", "Outdoor"}
