"""Hydrate repository rows into domain entities."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, TypeVar

from cateringapi.errors import CateringError, NotFoundError, StorageError
from cateringapi.storage.models import (
    Employee,
    EmployeeRow,
    Facility,
    FacilityRow,
    Location,
    Tag,
)

log = logging.getLogger(__name__)

R = TypeVar("R")
E = TypeVar("E")

LocationLookup = Callable[[int], Optional[Location]]
TagLookup = Callable[[int], Optional[Iterable[Tag]]]
FacilityIdsLookup = Callable[[int], Optional[Iterable[int]]]

# Per-row failures the list assemblers skip. Storage failures always propagate
ROW_ERRORS = (CateringError, KeyError, TypeError, ValueError)


def assemble_facility(
    row: FacilityRow, location_lookup: LocationLookup, tag_lookup: TagLookup
) -> Facility:
    location = location_lookup(row.location_id)
    if location is None:
        raise NotFoundError("Location", row.location_id)
    tags = tag_lookup(row.facility_id) or ()
    return Facility(
        id=row.facility_id,
        name=row.facility_name,
        location=location,
        creation_date=row.creation_date,
        tags=tuple(tags),
    )


def assemble_employee(row: EmployeeRow, facility_ids_lookup: FacilityIdsLookup) -> Employee:
    facility_ids = facility_ids_lookup(row.employee_id) or ()
    return Employee(
        id=row.employee_id,
        name=row.name,
        address=row.address,
        phone=row.phone,
        email=row.email,
        created_at=row.created_at,
        facility_ids=tuple(facility_ids),
    )


def assemble_list(rows: Iterable[R], assemble: Callable[[R], E], label: str) -> list[E]:
    """Assemble every row, skipping (and logging) the ones that fail."""
    entities = []
    for row in rows:
        try:
            entities.append(assemble(row))
        except StorageError:
            raise
        except ROW_ERRORS as e:
            log.warning(f"Skipping {label} row {row!r}: {e}")
    return entities


def assemble_facilities(
    rows: Iterable[FacilityRow], location_lookup: LocationLookup, tag_lookup: TagLookup
) -> list[Facility]:
    return assemble_list(
        rows,
        lambda row: assemble_facility(row, location_lookup, tag_lookup),
        "facility",
    )


def assemble_employees(
    rows: Iterable[EmployeeRow], facility_ids_lookup: FacilityIdsLookup
) -> list[Employee]:
    return assemble_list(
        rows,
        lambda row: assemble_employee(row, facility_ids_lookup),
        "employee",
    )
