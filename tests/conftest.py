"""Shared test fixtures for the Catering API."""

from __future__ import annotations

import jwt
import pytest
from fastapi.testclient import TestClient

from cateringapi.config import Settings
from cateringapi.schemas import EmployeeCreate, FacilityCreate, LocationCreate
from cateringapi.services.employees import EmployeeService
from cateringapi.services.facilities import FacilityService
from cateringapi.services.locations import LocationService
from cateringapi.services.tags import TagService
from cateringapi.storage.database import Database
from cateringapi.storage.repository import (
    EmployeeRepository,
    FacilityRepository,
    LocationRepository,
    TagRepository,
)

TEST_SECRET = "test-secret"

AMSTERDAM = {
    "city": "Amsterdam",
    "address": "Damrak 1",
    "zip_code": "1012AB",
    "country_code": "NL",
    "phone_number": "+31-20-1234567",
}

ROTTERDAM = {
    "city": "Rotterdam",
    "address": "Coolsingel 10",
    "zip_code": "3012AD",
    "country_code": "NL",
    "phone_number": "+31-10-7654321",
}


@pytest.fixture
def tmp_db(tmp_path):
    """Temp database with schema initialized."""
    db_path = tmp_path / "test.db"
    with Database(db_path) as db:
        yield db


@pytest.fixture
def location_repo(tmp_db):
    return LocationRepository(tmp_db)


@pytest.fixture
def tag_repo(tmp_db):
    return TagRepository(tmp_db)


@pytest.fixture
def facility_repo(tmp_db):
    return FacilityRepository(tmp_db)


@pytest.fixture
def employee_repo(tmp_db):
    return EmployeeRepository(tmp_db)


@pytest.fixture
def location_service(tmp_db):
    return LocationService(tmp_db)


@pytest.fixture
def tag_service(tmp_db):
    return TagService(tmp_db)


@pytest.fixture
def facility_service(tmp_db):
    return FacilityService(tmp_db)


@pytest.fixture
def employee_service(tmp_db):
    return EmployeeService(tmp_db)


@pytest.fixture
def sample_data(tmp_db, location_service, tag_service, facility_service, employee_service):
    """Two locations, three tags, three facilities and two employees."""
    amsterdam = location_service.create_location(LocationCreate(**AMSTERDAM))
    rotterdam = location_service.create_location(LocationCreate(**ROTTERDAM))
    wedding = tag_service.create_tag("Wedding")
    corporate = tag_service.create_tag("Corporate Event")
    outdoor = tag_service.create_tag("Outdoor")

    grand = facility_service.create_facility(
        FacilityCreate(
            name="Amsterdam Grand Catering",
            location_id=amsterdam.id,
            tags=[wedding.id, outdoor.id],
        )
    )
    canal = facility_service.create_facility(
        FacilityCreate(name="Canal Hall", location_id=amsterdam.id, tags=[corporate.id])
    )
    event = facility_service.create_facility(
        FacilityCreate(
            name="Rotterdam Event Center", location_id=rotterdam.id, tags=["Corporate Event"]
        )
    )

    john = employee_service.create_employee(
        EmployeeCreate(
            name="John Smith",
            address="123 Main St, Amsterdam",
            phone="+31 6 1234 5678",
            email="john.smith@example.com",
            facility_ids=[grand.id],
        )
    )
    emma = employee_service.create_employee(
        EmployeeCreate(
            name="Emma Johnson",
            address="456 Oak Ave, Rotterdam",
            phone="+31 6 2345 6789",
            email="emma.johnson@example.com",
            facility_ids=[event.id, canal.id],
        )
    )

    return {
        "locations": {"amsterdam": amsterdam, "rotterdam": rotterdam},
        "tags": {"wedding": wedding, "corporate": corporate, "outdoor": outdoor},
        "facilities": {"grand": grand, "canal": canal, "event": event},
        "employees": {"john": john, "emma": emma},
    }


@pytest.fixture
def settings(tmp_path):
    return Settings(db_path=tmp_path / "api.db", jwt_secret=TEST_SECRET)


@pytest.fixture
def token():
    return jwt.encode({"sub": "admin"}, TEST_SECRET, algorithm="HS256")


@pytest.fixture
def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(settings):
    """Test client for an app backed by a fresh database."""
    from cateringapi.web.app import create_app

    return TestClient(create_app(settings))


@pytest.fixture
def api_db(settings):
    """Direct handle on the database the test client uses."""
    with Database(settings.db_path) as db:
        yield db
