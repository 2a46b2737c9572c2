"""Tests for the location, facility and employee services."""

from __future__ import annotations

import logging

import pytest

from cateringapi.errors import (
    DuplicateResourceError,
    NotFoundError,
    ResourceInUseError,
    ValidationError,
)
from cateringapi.schemas import (
    EmployeeCreate,
    EmployeeUpdate,
    FacilityCreate,
    FacilityUpdate,
    LocationCreate,
    LocationUpdate,
)
from cateringapi.search.filters import EMPLOYEE_FIELDS, FACILITY_FIELDS, FilterSpecification
from cateringapi.services.employees import EmployeeService
from cateringapi.services.notifications import welcome_message

AMSTERDAM = LocationCreate(
    city="Amsterdam",
    address="Damrak 1",
    zip_code="1012AB",
    country_code="NL",
    phone_number="+31-20-1234567",
)


def facility_spec(**kwargs):
    return FilterSpecification.build(FACILITY_FIELDS.allowed, **kwargs)


def employee_spec(**kwargs):
    return FilterSpecification.build(EMPLOYEE_FIELDS.allowed, **kwargs)


class TestLocationService:
    def test_create(self, location_service):
        location = location_service.create_location(AMSTERDAM)
        assert location.city == "Amsterdam"
        assert location.country_code == "NL"

    def test_partial_update(self, location_service):
        location = location_service.create_location(AMSTERDAM)
        updated = location_service.update_location(
            location.id, LocationUpdate(phone_number="+31-20-7654321")
        )
        assert updated.phone_number == "+31-20-7654321"
        assert updated.city == "Amsterdam"

    def test_update_missing(self, location_service):
        with pytest.raises(NotFoundError):
            location_service.update_location(99, LocationUpdate(city="Delft"))

    def test_delete_in_use_checked_first(self, location_service, sample_data):
        amsterdam = sample_data["locations"]["amsterdam"]
        with pytest.raises(ResourceInUseError):
            location_service.delete_location(amsterdam.id)
        assert location_service.get_location(amsterdam.id) == amsterdam

    def test_delete_unused(self, location_service):
        location = location_service.create_location(AMSTERDAM)
        location_service.delete_location(location.id)
        with pytest.raises(NotFoundError):
            location_service.get_location(location.id)


class TestFacilityService:
    def test_listing_scenario(self, facility_service, sample_data):
        facilities, pagination = facility_service.list_facilities(
            facility_spec(values={"city": "Amsterdam"}, operator="AND"), 1, 10
        )
        assert {f.name for f in facilities} == {"Amsterdam Grand Catering", "Canal Hall"}
        assert pagination.total_items == 2
        assert pagination.total_pages == 1

    def test_page_out_of_range(self, facility_service, sample_data):
        with pytest.raises(ValidationError) as exc:
            facility_service.list_facilities(facility_spec(), 5, 2)
        assert "page" in exc.value.errors

    def test_empty_result_is_not_an_error(self, facility_service, sample_data):
        facilities, pagination = facility_service.list_facilities(
            facility_spec(values={"city": "Groningen"}), 1, 10
        )
        assert facilities == []
        assert pagination.total_pages == 0

    def test_list_skips_facility_with_broken_location(self, tmp_db, facility_service, sample_data):
        canal = sample_data["facilities"]["canal"]
        tmp_db.conn.execute("PRAGMA foreign_keys=OFF")
        tmp_db.conn.execute("UPDATE facilities SET location_id = 999 WHERE id = ?", (canal.id,))
        tmp_db.conn.commit()
        tmp_db.conn.execute("PRAGMA foreign_keys=ON")

        facilities, pagination = facility_service.list_facilities(facility_spec(), 1, 10)
        assert canal.id not in {f.id for f in facilities}
        assert len(facilities) == 2
        with pytest.raises(NotFoundError):
            facility_service.get_facility(canal.id)

    def test_create_with_smart_tags(self, facility_service, sample_data):
        amsterdam = sample_data["locations"]["amsterdam"]
        wedding = sample_data["tags"]["wedding"]
        facility = facility_service.create_facility(
            FacilityCreate(
                name="Harbour Club",
                location_id=amsterdam.id,
                tags=["wedding", wedding.id, "Gala"],
            )
        )
        assert {t.name for t in facility.tags} == {"Wedding", "Gala"}

    def test_superscript_digit_tag_becomes_a_name(self, facility_service, sample_data):
        amsterdam = sample_data["locations"]["amsterdam"]
        facility = facility_service.create_facility(
            FacilityCreate(name="Harbour Club", location_id=amsterdam.id, tags=["²"])
        )
        assert [t.name for t in facility.tags] == ["²"]

    def test_create_with_unknown_location(self, facility_service):
        with pytest.raises(NotFoundError):
            facility_service.create_facility(FacilityCreate(name="Nowhere", location_id=42))

    def test_create_with_unknown_tag_id_rolls_back(self, tmp_db, facility_service, sample_data):
        amsterdam = sample_data["locations"]["amsterdam"]
        with pytest.raises(NotFoundError):
            facility_service.create_facility(
                FacilityCreate(name="Harbour Club", location_id=amsterdam.id, tags=[999, "Gala"])
            )
        counts = tmp_db.table_counts()
        assert counts["facilities"] == 3
        assert facility_service.tags.find_by_name("Gala") is None

    def test_update_leaves_tags_when_absent(self, facility_service, sample_data):
        grand = sample_data["facilities"]["grand"]
        updated = facility_service.update_facility(grand.id, FacilityUpdate(name="Grand Hall"))
        assert updated.name == "Grand Hall"
        assert updated.tags == grand.tags

    def test_update_empty_list_clears_tags(self, facility_service, sample_data):
        grand = sample_data["facilities"]["grand"]
        assert facility_service.update_facility(grand.id, FacilityUpdate(tags=[])).tags == ()

    def test_update_legacy_tag_fields(self, facility_service, sample_data):
        grand = sample_data["facilities"]["grand"]
        corporate = sample_data["tags"]["corporate"]
        updated = facility_service.update_facility(
            grand.id, FacilityUpdate(tagIds=[corporate.id], tagNames=["Rooftop"])
        )
        assert {t.name for t in updated.tags} == {"Corporate Event", "Rooftop"}

    def test_update_unknown_location(self, facility_service, sample_data):
        grand = sample_data["facilities"]["grand"]
        with pytest.raises(NotFoundError):
            facility_service.update_facility(grand.id, FacilityUpdate(location_id=404))

    def test_facilities_by_location(self, facility_service, sample_data):
        rotterdam = sample_data["locations"]["rotterdam"]
        facilities = facility_service.facilities_by_location(rotterdam.id)
        assert [f.name for f in facilities] == ["Rotterdam Event Center"]

    def test_delete_cascades_associations(self, tmp_db, facility_service, sample_data):
        grand = sample_data["facilities"]["grand"]
        facility_service.delete_facility(grand.id)
        with pytest.raises(NotFoundError):
            facility_service.get_facility(grand.id)
        row = tmp_db.conn.execute(
            "SELECT COUNT(*) FROM employee_facilities WHERE facility_id = ?", (grand.id,)
        ).fetchone()
        assert row[0] == 0


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def employee_created(self, employee):
        self.sent.append(employee)


class FailingNotifier:
    def employee_created(self, employee):
        raise ConnectionError("mail server unreachable")


class TestEmployeeService:
    NEW = {
        "name": "Sophia Davis",
        "address": "321 Elm St, The Hague",
        "phone": "+31 6 4567 8901",
        "email": "sophia.davis@example.com",
    }

    def test_list_with_free_text(self, employee_service, sample_data):
        employees, pagination = employee_service.list_employees(
            employee_spec(query="smith"), 1, 10
        )
        assert [e.name for e in employees] == ["John Smith"]
        assert pagination.total_items == 1

    def test_list_or_filters(self, employee_service, sample_data):
        employees, _ = employee_service.list_employees(
            employee_spec(values={"employee_name": "John", "email": "emma"}, operator="OR"),
            1,
            10,
        )
        assert {e.name for e in employees} == {"John Smith", "Emma Johnson"}

    def test_create_with_facilities(self, employee_service, sample_data):
        grand = sample_data["facilities"]["grand"]
        employee = employee_service.create_employee(
            EmployeeCreate(**self.NEW, facility_ids=[grand.id, grand.id])
        )
        assert employee.facility_ids == (grand.id,)
        assert employee.created_at

    def test_duplicate_email(self, employee_service, sample_data):
        with pytest.raises(DuplicateResourceError):
            employee_service.create_employee(
                EmployeeCreate(**{**self.NEW, "email": "John.Smith@example.com"})
            )

    def test_unknown_facility(self, employee_service):
        with pytest.raises(NotFoundError):
            employee_service.create_employee(EmployeeCreate(**self.NEW, facility_ids=[77]))

    def test_update_email_to_own_is_fine(self, employee_service, sample_data):
        john = sample_data["employees"]["john"]
        updated = employee_service.update_employee(john.id, EmployeeUpdate(email=john.email))
        assert updated.email == john.email

    def test_update_email_taken(self, employee_service, sample_data):
        john = sample_data["employees"]["john"]
        with pytest.raises(DuplicateResourceError):
            employee_service.update_employee(
                john.id, EmployeeUpdate(email="emma.johnson@example.com")
            )

    def test_update_facilities_only(self, employee_service, sample_data):
        emma = sample_data["employees"]["emma"]
        updated = employee_service.update_employee(emma.id, EmployeeUpdate(facility_ids=[]))
        assert updated.facility_ids == ()

    def test_delete(self, employee_service, sample_data):
        john = sample_data["employees"]["john"]
        employee_service.delete_employee(john.id)
        with pytest.raises(NotFoundError):
            employee_service.get_employee(john.id)


class TestWelcomeNotification:
    NEW = TestEmployeeService.NEW

    def test_sent_once_on_create(self, tmp_db):
        notifier = RecordingNotifier()
        service = EmployeeService(tmp_db, notifier=notifier)
        employee = service.create_employee(EmployeeCreate(**self.NEW))
        assert notifier.sent == [employee]

    def test_not_sent_on_update(self, tmp_db):
        notifier = RecordingNotifier()
        service = EmployeeService(tmp_db, notifier=notifier)
        employee = service.create_employee(EmployeeCreate(**self.NEW))
        service.update_employee(employee.id, EmployeeUpdate(phone="+31 6 0000 0000"))
        assert len(notifier.sent) == 1

    def test_not_sent_when_create_fails(self, tmp_db):
        notifier = RecordingNotifier()
        service = EmployeeService(tmp_db, notifier=notifier)
        with pytest.raises(NotFoundError):
            service.create_employee(EmployeeCreate(**self.NEW, facility_ids=[5]))
        assert notifier.sent == []

    def test_failure_keeps_the_employee(self, tmp_db, caplog):
        service = EmployeeService(tmp_db, notifier=FailingNotifier())
        with caplog.at_level(logging.WARNING, logger="cateringapi.services.employees"):
            employee = service.create_employee(EmployeeCreate(**self.NEW))
        assert service.get_employee(employee.id) == employee
        assert "mail server unreachable" in caplog.text

    def test_default_notifier_logs_welcome(self, employee_service, caplog):
        with caplog.at_level(logging.INFO, logger="cateringapi.services.notifications"):
            employee = employee_service.create_employee(EmployeeCreate(**self.NEW))
        assert welcome_message(employee) in caplog.text
        assert "Welcome to" in welcome_message(employee)
        assert employee.email in welcome_message(employee)
