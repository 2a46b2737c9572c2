"""Employee service: filtered listing and CRUD with facility assignments."""

from __future__ import annotations

import logging
from typing import Optional

from cateringapi.errors import DuplicateResourceError, NotFoundError
from cateringapi.schemas import EmployeeCreate, EmployeeUpdate
from cateringapi.search.filters import EMPLOYEE_FIELDS, FilterSpecification, compile_for
from cateringapi.search.pagination import PaginationResult, plan_page
from cateringapi.services.assembly import assemble_employee, assemble_employees
from cateringapi.services.notifications import LogNotifier
from cateringapi.storage.database import Database
from cateringapi.storage.models import Employee
from cateringapi.storage.repository import (
    EMPLOYEE_COLUMNS,
    EmployeeRepository,
    FacilityRepository,
)

log = logging.getLogger(__name__)


def _unique_ids(ids: Optional[list[int]]) -> Optional[list[int]]:
    return None if ids is None else sorted(set(ids))


class EmployeeService:
    def __init__(self, db: Database, notifier=None):
        self.db = db
        self.repo = EmployeeRepository(db)
        self.facilities = FacilityRepository(db)
        self.notifier = notifier or LogNotifier()

    def list_employees(
        self, spec: FilterSpecification, page: int, per_page: int
    ) -> tuple[list[Employee], PaginationResult]:
        predicate = compile_for(EMPLOYEE_FIELDS, spec)
        log.debug(f"Employee filter: {predicate.clause} {predicate.binds}")
        pagination, offset, limit = plan_page(self.repo.count(predicate), page, per_page)
        rows = self.repo.query(predicate, limit, offset)
        return assemble_employees(rows, self.repo.facility_ids_for), pagination

    def get_employee(self, id: int) -> Employee:
        row = self.repo.find_by_id(id)
        if row is None:
            raise NotFoundError("Employee", id)
        return assemble_employee(row, self.repo.facility_ids_for)

    def _ensure_facilities_exist(self, facility_ids: list[int]):
        missing = sorted(set(facility_ids) - self.facilities.existing_ids(facility_ids))
        if missing:
            raise NotFoundError("Facility", ", ".join(str(m) for m in missing))

    def create_employee(self, body: EmployeeCreate) -> Employee:
        fields = body.present(*EMPLOYEE_COLUMNS)
        facility_ids = _unique_ids(body.facility_ids)
        if not self.repo.is_email_unique(fields["email"]):
            raise DuplicateResourceError("Employee", "email", fields["email"])
        if facility_ids:
            self._ensure_facilities_exist(facility_ids)

        with self.db.transaction():
            employee_id = self.repo.create(fields)
            if facility_ids:
                self.repo.replace_facilities(employee_id, facility_ids)
        log.info(f"Created employee {employee_id}")

        employee = self.get_employee(employee_id)
        self._welcome(employee)
        return employee

    def _welcome(self, employee: Employee):
        # A failed welcome never undoes the create
        try:
            self.notifier.employee_created(employee)
        except Exception as e:
            log.warning(f"Welcome notification for employee {employee.id} failed: {e}")

    def update_employee(self, id: int, body: EmployeeUpdate) -> Employee:
        """Partial update. Facility links are replaced only when supplied."""
        if self.repo.find_by_id(id) is None:
            raise NotFoundError("Employee", id)
        fields = body.present(*EMPLOYEE_COLUMNS)
        facility_ids = _unique_ids(body.facility_ids)
        if "email" in fields and not self.repo.is_email_unique(fields["email"], exclude_id=id):
            raise DuplicateResourceError("Employee", "email", fields["email"])
        if facility_ids:
            self._ensure_facilities_exist(facility_ids)

        with self.db.transaction():
            if fields:
                self.repo.update(id, fields)
            if facility_ids is not None:
                self.repo.replace_facilities(id, facility_ids)
        return self.get_employee(id)

    def delete_employee(self, id: int):
        if self.repo.find_by_id(id) is None:
            raise NotFoundError("Employee", id)
        with self.db.transaction():
            self.repo.delete(id)
        log.info(f"Deleted employee {id}")
