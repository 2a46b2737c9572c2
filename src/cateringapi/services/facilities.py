"""Facility service: filtered listing, CRUD and smart tag handling."""

from __future__ import annotations

import logging

from cateringapi.errors import NotFoundError
from cateringapi.schemas import FacilityCreate, FacilityUpdate
from cateringapi.search.filters import FACILITY_FIELDS, FilterSpecification, compile_for
from cateringapi.search.pagination import PaginationResult, plan_page
from cateringapi.services.assembly import assemble_facilities, assemble_facility
from cateringapi.services.locations import LocationService
from cateringapi.services.tags import TagService
from cateringapi.storage.database import Database
from cateringapi.storage.models import Facility
from cateringapi.storage.repository import FacilityRepository

log = logging.getLogger(__name__)


class FacilityService:
    def __init__(self, db: Database):
        self.db = db
        self.repo = FacilityRepository(db)
        self.locations = LocationService(db)
        self.tags = TagService(db)

    def _assemble_many(self, rows) -> list[Facility]:
        return assemble_facilities(rows, self.locations.find, self.tags.tags_for_facility)

    def list_facilities(
        self, spec: FilterSpecification, page: int, per_page: int
    ) -> tuple[list[Facility], PaginationResult]:
        predicate = compile_for(FACILITY_FIELDS, spec)
        log.debug(f"Facility filter: {predicate.clause} {predicate.binds}")
        pagination, offset, limit = plan_page(self.repo.count(predicate), page, per_page)
        rows = self.repo.query(predicate, limit, offset)
        return self._assemble_many(rows), pagination

    def get_facility(self, id: int) -> Facility:
        row = self.repo.find_by_id(id)
        if row is None:
            raise NotFoundError("Facility", id)
        return assemble_facility(row, self.locations.find, self.tags.tags_for_facility)

    def facilities_by_location(self, location_id: int) -> list[Facility]:
        self.locations.get_location(location_id)
        return self._assemble_many(self.repo.find_by_location_id(location_id))

    def _apply_tags(self, facility_id: int, tag_inputs: list):
        tag_ids = self.tags.resolve(tag_inputs)
        self.tags.ensure_exist(tag_ids)
        self.repo.replace_tags(facility_id, tag_ids)

    def create_facility(self, body: FacilityCreate) -> Facility:
        self.locations.get_location(body.location_id)
        tag_inputs = body.tag_inputs()

        with self.db.transaction():
            facility_id = self.repo.create(body.name, body.location_id)
            if tag_inputs:
                self._apply_tags(facility_id, tag_inputs)
        log.info(f"Created facility {facility_id} '{body.name}'")
        return self.get_facility(facility_id)

    def update_facility(self, id: int, body: FacilityUpdate) -> Facility:
        """Partial update. Tags are rewritten only when supplied; [] clears them."""
        if self.repo.find_by_id(id) is None:
            raise NotFoundError("Facility", id)
        fields = body.present("name", "location_id")
        tag_inputs = body.tag_inputs()
        if "location_id" in fields:
            self.locations.get_location(fields["location_id"])

        with self.db.transaction():
            if fields:
                self.repo.update(id, fields)
            if tag_inputs is not None:
                self._apply_tags(id, tag_inputs)
        return self.get_facility(id)

    def delete_facility(self, id: int):
        if self.repo.find_by_id(id) is None:
            raise NotFoundError("Facility", id)
        with self.db.transaction():
            self.repo.delete(id)
        log.info(f"Deleted facility {id}")
