"""Location service."""

from __future__ import annotations

import logging

from cateringapi.errors import NotFoundError, ResourceInUseError
from cateringapi.schemas import LocationCreate, LocationUpdate
from cateringapi.search.pagination import PaginationResult, plan_page
from cateringapi.storage.database import Database
from cateringapi.storage.models import Location
from cateringapi.storage.repository import LOCATION_COLUMNS, LocationRepository

log = logging.getLogger(__name__)


class LocationService:
    def __init__(self, db: Database):
        self.db = db
        self.repo = LocationRepository(db)

    def list_locations(self, page: int, per_page: int) -> tuple[list[Location], PaginationResult]:
        pagination, offset, limit = plan_page(self.repo.count(), page, per_page)
        return self.repo.query(limit, offset), pagination

    def find(self, id: int):
        return self.repo.find_by_id(id)

    def get_location(self, id: int) -> Location:
        location = self.repo.find_by_id(id)
        if location is None:
            raise NotFoundError("Location", id)
        return location

    def create_location(self, body: LocationCreate) -> Location:
        fields = body.present(*LOCATION_COLUMNS)
        with self.db.transaction():
            location_id = self.repo.create(fields)
        log.info(f"Created location {location_id} in {fields['city']}")
        return Location(id=location_id, **fields)

    def update_location(self, id: int, body: LocationUpdate) -> Location:
        self.get_location(id)
        fields = body.present(*LOCATION_COLUMNS)
        with self.db.transaction():
            self.repo.update(id, fields)
        return self.get_location(id)

    def delete_location(self, id: int):
        self.get_location(id)
        if self.repo.is_used_by_facilities(id):
            raise ResourceInUseError("location", id, "facilities")
        with self.db.transaction():
            self.repo.delete(id)
        log.info(f"Deleted location {id}")
