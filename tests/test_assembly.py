"""Tests for cateringapi.services.assembly."""

from __future__ import annotations

import logging

import pytest

from cateringapi.errors import NotFoundError, StorageError
from cateringapi.services.assembly import (
    assemble_employee,
    assemble_employees,
    assemble_facilities,
    assemble_facility,
)
from cateringapi.storage.models import EmployeeRow, FacilityRow, Location, Tag

LOCATIONS = {
    1: Location(1, "Amsterdam", "Damrak 1", "1012AB", "NL", "+31-20-1234567"),
    3: Location(3, "Utrecht", "Domplein 4", "3512JC", "NL", "+31-30-4567890"),
}
TAGS = {10: [Tag(1, "Wedding")], 30: [Tag(2, "Outdoor"), Tag(3, "Indoor")]}


def row(facility_id, location_id):
    return FacilityRow(
        facility_id=facility_id,
        facility_name=f"Facility {facility_id}",
        location_id=location_id,
        creation_date="2024-01-01",
    )


class TestAssembleFacility:
    def test_hydrates_location_and_tags(self):
        facility = assemble_facility(row(10, 1), LOCATIONS.get, TAGS.get)
        assert facility.location.city == "Amsterdam"
        assert facility.tags == (Tag(1, "Wedding"),)

    def test_no_tags_defaults_to_empty(self):
        facility = assemble_facility(row(20, 1), LOCATIONS.get, TAGS.get)
        assert facility.tags == ()

    def test_missing_location_raises(self):
        with pytest.raises(NotFoundError):
            assemble_facility(row(20, 2), LOCATIONS.get, TAGS.get)

    def test_to_dict(self):
        data = assemble_facility(row(30, 3), LOCATIONS.get, TAGS.get).to_dict()
        assert data["location"]["zip_code"] == "3512JC"
        assert [t["name"] for t in data["tags"]] == ["Outdoor", "Indoor"]


class TestAssembleFacilities:
    def test_skips_row_with_missing_location(self, caplog):
        rows = [row(10, 1), row(20, 2), row(30, 3)]
        with caplog.at_level(logging.WARNING):
            facilities = assemble_facilities(rows, LOCATIONS.get, TAGS.get)
        assert [f.id for f in facilities] == [10, 30]
        assert "Skipping facility" in caplog.text

    def test_skips_row_whose_lookup_raises(self):
        def flaky_tags(facility_id):
            if facility_id == 20:
                raise KeyError(facility_id)
            return TAGS.get(facility_id)

        rows = [row(10, 1), row(20, 1), row(30, 3)]
        assert len(assemble_facilities(rows, LOCATIONS.get, flaky_tags)) == 2

    def test_storage_error_propagates(self):
        def broken(location_id):
            raise StorageError("SELECT", "locations")

        with pytest.raises(StorageError):
            assemble_facilities([row(10, 1)], broken, TAGS.get)


class TestAssembleEmployees:
    def employee_row(self, id):
        return EmployeeRow(id, f"Employee {id}", "Street 1", "+31 6", f"e{id}@example.com", None)

    def test_facility_ids(self):
        employee = assemble_employee(self.employee_row(1), lambda _: [4, 5])
        assert employee.facility_ids == (4, 5)
        assert employee.to_dict()["facility_ids"] == [4, 5]

    def test_none_means_no_facilities(self):
        assert assemble_employee(self.employee_row(1), lambda _: None).facility_ids == ()

    def test_skips_failing_row(self):
        def lookup(employee_id):
            if employee_id == 2:
                raise TypeError("bad row")
            return [1]

        rows = [self.employee_row(i) for i in (1, 2, 3)]
        assert [e.id for e in assemble_employees(rows, lookup)] == [1, 3]
