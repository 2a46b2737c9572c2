"""Data models for the Catering API.

Row structs are what repositories return; domain entities are what the
services assemble from them and hand to the web layer.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Optional


# ── Rows ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class FacilityRow:
    facility_id: int
    facility_name: str
    location_id: int
    creation_date: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "FacilityRow":
        return cls(
            facility_id=row["facility_id"],
            facility_name=row["facility_name"],
            location_id=row["location_id"],
            creation_date=row["creation_date"],
        )


@dataclass(frozen=True)
class EmployeeRow:
    employee_id: int
    name: str
    address: str
    phone: str
    email: str
    created_at: Optional[str]

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "EmployeeRow":
        return cls(
            employee_id=row["employee_id"],
            name=row["name"],
            address=row["address"],
            phone=row["phone"],
            email=row["email"],
            created_at=row["created_at"],
        )


# ── Entities ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    id: int
    city: str
    address: str
    zip_code: str
    country_code: str
    phone_number: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Location":
        return cls(
            id=row["id"],
            city=row["city"],
            address=row["address"],
            zip_code=row["zip_code"],
            country_code=row["country_code"],
            phone_number=row["phone_number"],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "city": self.city,
            "address": self.address,
            "zip_code": self.zip_code,
            "country_code": self.country_code,
            "phone_number": self.phone_number,
        }


@dataclass(frozen=True)
class Tag:
    id: int
    name: str

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Tag":
        return cls(id=row["id"], name=row["name"])

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class Facility:
    id: int
    name: str
    location: Location
    creation_date: str
    tags: tuple[Tag, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "creation_date": self.creation_date,
            "location": self.location.to_dict(),
            "tags": [t.to_dict() for t in self.tags],
        }


@dataclass(frozen=True)
class Employee:
    id: int
    name: str
    address: str
    phone: str
    email: str
    created_at: Optional[str]
    facility_ids: tuple[int, ...] = ()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "created_at": self.created_at,
            "facility_ids": list(self.facility_ids),
        }
