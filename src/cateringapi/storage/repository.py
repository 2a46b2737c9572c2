"""CRUD operations for the catering database.

Repositories never commit. Callers wrap writes in Database.transaction()
so an entity and its associations are written as one unit.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterable, Optional

from cateringapi.errors import DuplicateResourceError, StorageError
from cateringapi.search.filters import CompiledPredicate
from cateringapi.storage.database import Database
from cateringapi.storage.models import EmployeeRow, FacilityRow, Location, Tag

log = logging.getLogger(__name__)

LOCATION_COLUMNS = ("city", "address", "zip_code", "country_code", "phone_number")
FACILITY_COLUMNS = ("name", "location_id")
EMPLOYEE_COLUMNS = ("name", "address", "phone", "email")


@contextmanager
def storage_errors(operation: str, table: str, duplicate: Optional[tuple] = None):
    """Translate sqlite3 failures into application errors.

    ``duplicate`` is ``(resource, field, value)``; when given, a UNIQUE
    constraint failure becomes a DuplicateResourceError.
    """
    try:
        yield
    except sqlite3.IntegrityError as e:
        if duplicate and "UNIQUE" in str(e):
            raise DuplicateResourceError(*duplicate) from e
        log.error(f"{operation} on {table} failed: {e}")
        raise StorageError(operation, table, str(e)) from e
    except sqlite3.Error as e:
        log.error(f"{operation} on {table} failed: {e}")
        raise StorageError(operation, table, str(e)) from e


def _set_clause(fields: dict, allowed: tuple[str, ...]) -> tuple[str, dict]:
    """Build ``col = :col`` pairs from known columns only."""
    columns = [c for c in allowed if c in fields]
    if not columns:
        raise ValueError("No updatable fields given")
    return ", ".join(f"{c} = :{c}" for c in columns), {c: fields[c] for c in columns}


def _placeholders(ids: list[int]) -> str:
    return ", ".join("?" for _ in ids)


def tag_key(name: str) -> str:
    """Lookup key for a tag name: stripped and casefolded."""
    return name.strip().casefold()


class _BaseRepository:
    table = ""

    def __init__(self, db: Database):
        self.db = db

    def _delete(self, id: int) -> bool:
        with storage_errors("DELETE", self.table):
            cursor = self.db.conn.execute(
                f"DELETE FROM {self.table} WHERE id = ?", (id,)
            )
        return cursor.rowcount > 0

    def _update(self, id: int, fields: dict, allowed: tuple[str, ...], duplicate=None) -> bool:
        clause, params = _set_clause(fields, allowed)
        params["id"] = id
        with storage_errors("UPDATE", self.table, duplicate):
            cursor = self.db.conn.execute(
                f"UPDATE {self.table} SET {clause} WHERE id = :id", params
            )
        return cursor.rowcount > 0

    def count(self) -> int:
        with storage_errors("SELECT", self.table):
            row = self.db.conn.execute(f"SELECT COUNT(*) FROM {self.table}").fetchone()
        return row[0]

    def existing_ids(self, ids: Iterable[int]) -> set[int]:
        """Return the subset of ``ids`` that exist in this table."""
        ids = sorted(set(ids))
        if not ids:
            return set()
        with storage_errors("SELECT", self.table):
            rows = self.db.conn.execute(
                f"SELECT id FROM {self.table} WHERE id IN ({_placeholders(ids)})",
                ids,
            ).fetchall()
        return {r["id"] for r in rows}


# ── Locations ──────────────────────────────────────────────────────


class LocationRepository(_BaseRepository):
    table = "locations"

    def query(self, limit: int, offset: int) -> list[Location]:
        with storage_errors("SELECT", self.table):
            rows = self.db.conn.execute(
                "SELECT * FROM locations ORDER BY id LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [Location.from_row(r) for r in rows]

    def find_by_id(self, id: int) -> Optional[Location]:
        with storage_errors("SELECT", self.table):
            row = self.db.conn.execute(
                "SELECT * FROM locations WHERE id = ?", (id,)
            ).fetchone()
        return Location.from_row(row) if row else None

    def create(self, fields: dict) -> int:
        with storage_errors("INSERT", self.table):
            cursor = self.db.conn.execute(
                """INSERT INTO locations
                   (city, address, zip_code, country_code, phone_number)
                   VALUES (:city, :address, :zip_code, :country_code, :phone_number)""",
                {c: fields[c] for c in LOCATION_COLUMNS},
            )
        return cursor.lastrowid

    def update(self, id: int, fields: dict) -> bool:
        return self._update(id, fields, LOCATION_COLUMNS)

    def delete(self, id: int) -> bool:
        return self._delete(id)

    def is_used_by_facilities(self, id: int) -> bool:
        with storage_errors("SELECT", "facilities"):
            row = self.db.conn.execute(
                "SELECT 1 FROM facilities WHERE location_id = ? LIMIT 1", (id,)
            ).fetchone()
        return row is not None


# ── Tags ───────────────────────────────────────────────────────────


class TagRepository(_BaseRepository):
    table = "tags"

    def query(self, limit: int, offset: int) -> list[Tag]:
        with storage_errors("SELECT", self.table):
            rows = self.db.conn.execute(
                "SELECT id, name FROM tags ORDER BY id LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
        return [Tag.from_row(r) for r in rows]

    def find_by_id(self, id: int) -> Optional[Tag]:
        with storage_errors("SELECT", self.table):
            row = self.db.conn.execute(
                "SELECT id, name FROM tags WHERE id = ?", (id,)
            ).fetchone()
        return Tag.from_row(row) if row else None

    def find_by_name(self, name: str) -> Optional[Tag]:
        """Exact name match, ignoring case (Unicode casefolding)."""
        with storage_errors("SELECT", self.table):
            row = self.db.conn.execute(
                "SELECT id, name FROM tags WHERE name_key = ?", (tag_key(name),)
            ).fetchone()
        return Tag.from_row(row) if row else None

    def find_by_facility_id(self, facility_id: int) -> list[Tag]:
        with storage_errors("SELECT", "facility_tags"):
            rows = self.db.conn.execute(
                """SELECT t.id, t.name
                   FROM tags t
                   JOIN facility_tags ft ON ft.tag_id = t.id
                   WHERE ft.facility_id = ?
                   ORDER BY t.name""",
                (facility_id,),
            ).fetchall()
        return [Tag.from_row(r) for r in rows]

    def is_name_unique(self, name: str, exclude_id: Optional[int] = None) -> bool:
        tag = self.find_by_name(name)
        return tag is None or tag.id == exclude_id

    def create(self, name: str) -> int:
        with storage_errors("INSERT", self.table, ("Tag", "name", name)):
            cursor = self.db.conn.execute(
                "INSERT INTO tags (name, name_key) VALUES (?, ?)", (name, tag_key(name))
            )
        return cursor.lastrowid

    def update(self, id: int, name: str) -> bool:
        return self._update(
            id,
            {"name": name, "name_key": tag_key(name)},
            ("name", "name_key"),
            ("Tag", "name", name),
        )

    def delete(self, id: int) -> bool:
        return self._delete(id)

    def is_used_by_facilities(self, id: int) -> bool:
        with storage_errors("SELECT", "facility_tags"):
            row = self.db.conn.execute(
                "SELECT 1 FROM facility_tags WHERE tag_id = ? LIMIT 1", (id,)
            ).fetchone()
        return row is not None


# ── Facilities ─────────────────────────────────────────────────────

_FACILITY_FROM = """
    FROM facilities f
    LEFT JOIN locations l ON f.location_id = l.id
    LEFT JOIN facility_tags ft ON f.id = ft.facility_id
    LEFT JOIN tags t ON ft.tag_id = t.id
"""

_FACILITY_SELECT = """
    SELECT f.id AS facility_id, f.name AS facility_name,
           f.location_id, f.creation_date
"""


class FacilityRepository(_BaseRepository):
    table = "facilities"

    def query(self, predicate: CompiledPredicate, limit: int, offset: int) -> list[FacilityRow]:
        params = predicate.params()
        params.update(page_limit=limit, page_offset=offset)
        sql = (
            _FACILITY_SELECT + _FACILITY_FROM
            + f"WHERE {predicate.clause} GROUP BY f.id ORDER BY f.id "
            + "LIMIT :page_limit OFFSET :page_offset"
        )
        with storage_errors("SELECT", self.table):
            rows = self.db.conn.execute(sql, params).fetchall()
        return [FacilityRow.from_row(r) for r in rows]

    def count(self, predicate: Optional[CompiledPredicate] = None) -> int:
        if predicate is None:
            return super().count()
        sql = f"SELECT COUNT(DISTINCT f.id) {_FACILITY_FROM} WHERE {predicate.clause}"
        with storage_errors("SELECT", self.table):
            row = self.db.conn.execute(sql, predicate.params()).fetchone()
        return row[0]

    def find_by_id(self, id: int) -> Optional[FacilityRow]:
        with storage_errors("SELECT", self.table):
            row = self.db.conn.execute(
                _FACILITY_SELECT + "FROM facilities f WHERE f.id = ?", (id,)
            ).fetchone()
        return FacilityRow.from_row(row) if row else None

    def find_by_location_id(self, location_id: int) -> list[FacilityRow]:
        with storage_errors("SELECT", self.table):
            rows = self.db.conn.execute(
                _FACILITY_SELECT + "FROM facilities f WHERE f.location_id = ? ORDER BY f.id",
                (location_id,),
            ).fetchall()
        return [FacilityRow.from_row(r) for r in rows]

    def create(self, name: str, location_id: int) -> int:
        with storage_errors("INSERT", self.table):
            cursor = self.db.conn.execute(
                "INSERT INTO facilities (name, location_id) VALUES (?, ?)",
                (name, location_id),
            )
        return cursor.lastrowid

    def update(self, id: int, fields: dict) -> bool:
        return self._update(id, fields, FACILITY_COLUMNS)

    def delete(self, id: int) -> bool:
        return self._delete(id)

    def replace_tags(self, facility_id: int, tag_ids: Iterable[int]):
        """Make ``tag_ids`` the facility's complete tag set."""
        with storage_errors("REPLACE", "facility_tags"):
            self.db.conn.execute(
                "DELETE FROM facility_tags WHERE facility_id = ?", (facility_id,)
            )
            self.db.conn.executemany(
                "INSERT INTO facility_tags (facility_id, tag_id) VALUES (?, ?)",
                [(facility_id, t) for t in sorted(set(tag_ids))],
            )


# ── Employees ──────────────────────────────────────────────────────

_EMPLOYEE_FROM = """
    FROM employees e
    LEFT JOIN employee_facilities ef ON e.id = ef.employee_id
    LEFT JOIN facilities f ON ef.facility_id = f.id
    LEFT JOIN locations l ON f.location_id = l.id
"""

_EMPLOYEE_SELECT = """
    SELECT e.id AS employee_id, e.name, e.address, e.phone,
           e.email, e.created_at
"""


class EmployeeRepository(_BaseRepository):
    table = "employees"

    def query(self, predicate: CompiledPredicate, limit: int, offset: int) -> list[EmployeeRow]:
        params = predicate.params()
        params.update(page_limit=limit, page_offset=offset)
        sql = (
            _EMPLOYEE_SELECT + _EMPLOYEE_FROM
            + f"WHERE {predicate.clause} GROUP BY e.id ORDER BY e.name, e.id "
            + "LIMIT :page_limit OFFSET :page_offset"
        )
        with storage_errors("SELECT", self.table):
            rows = self.db.conn.execute(sql, params).fetchall()
        return [EmployeeRow.from_row(r) for r in rows]

    def count(self, predicate: Optional[CompiledPredicate] = None) -> int:
        if predicate is None:
            return super().count()
        sql = f"SELECT COUNT(DISTINCT e.id) {_EMPLOYEE_FROM} WHERE {predicate.clause}"
        with storage_errors("SELECT", self.table):
            row = self.db.conn.execute(sql, predicate.params()).fetchone()
        return row[0]

    def find_by_id(self, id: int) -> Optional[EmployeeRow]:
        with storage_errors("SELECT", self.table):
            row = self.db.conn.execute(
                _EMPLOYEE_SELECT + "FROM employees e WHERE e.id = ?", (id,)
            ).fetchone()
        return EmployeeRow.from_row(row) if row else None

    def facility_ids_for(self, employee_id: int) -> list[int]:
        with storage_errors("SELECT", "employee_facilities"):
            rows = self.db.conn.execute(
                """SELECT facility_id FROM employee_facilities
                   WHERE employee_id = ? ORDER BY facility_id""",
                (employee_id,),
            ).fetchall()
        return [r["facility_id"] for r in rows]

    def is_email_unique(self, email: str, exclude_id: Optional[int] = None) -> bool:
        with storage_errors("SELECT", self.table):
            row = self.db.conn.execute(
                "SELECT id FROM employees WHERE email = ? COLLATE NOCASE", (email,)
            ).fetchone()
        return row is None or row["id"] == exclude_id

    def create(self, fields: dict) -> int:
        with storage_errors("INSERT", self.table, ("Employee", "email", fields.get("email"))):
            cursor = self.db.conn.execute(
                """INSERT INTO employees (name, address, phone, email)
                   VALUES (:name, :address, :phone, :email)""",
                {c: fields[c] for c in EMPLOYEE_COLUMNS},
            )
        return cursor.lastrowid

    def update(self, id: int, fields: dict) -> bool:
        return self._update(
            id, fields, EMPLOYEE_COLUMNS, ("Employee", "email", fields.get("email"))
        )

    def delete(self, id: int) -> bool:
        return self._delete(id)

    def replace_facilities(self, employee_id: int, facility_ids: Iterable[int]):
        with storage_errors("REPLACE", "employee_facilities"):
            self.db.conn.execute(
                "DELETE FROM employee_facilities WHERE employee_id = ?", (employee_id,)
            )
            self.db.conn.executemany(
                "INSERT INTO employee_facilities (employee_id, facility_id) VALUES (?, ?)",
                [(employee_id, f) for f in sorted(set(facility_ids))],
            )
