"""Dependency wiring for web routes."""

from __future__ import annotations

from contextlib import contextmanager

from fastapi import Request

from cateringapi.config import Settings
from cateringapi.services.employees import EmployeeService
from cateringapi.services.facilities import FacilityService
from cateringapi.services.locations import LocationService
from cateringapi.services.tags import TagService
from cateringapi.storage.database import Database


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@contextmanager
def get_db(settings: Settings):
    """Open a database connection for one request, ensuring it's closed."""
    with Database(settings.db_path) as db:
        yield db


def location_service(db: Database) -> LocationService:
    return LocationService(db)


def tag_service(db: Database) -> TagService:
    return TagService(db)


def facility_service(db: Database) -> FacilityService:
    return FacilityService(db)


def employee_service(db: Database) -> EmployeeService:
    return EmployeeService(db)
