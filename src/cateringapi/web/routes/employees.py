"""Employee routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from cateringapi.schemas import EmployeeCreate, EmployeeUpdate
from cateringapi.search.filters import EMPLOYEE_FIELDS
from cateringapi.web.auth import require_auth
from cateringapi.web.deps import employee_service, get_db, get_settings
from cateringapi.web.params import build_filter_spec, page_params

router = APIRouter(prefix="/employees", dependencies=[Depends(require_auth)])


@router.get("")
async def list_employees(request: Request, paging: tuple[int, int] = Depends(page_params)):
    settings = get_settings(request)
    spec = build_filter_spec(EMPLOYEE_FIELDS, request.query_params)
    page, per_page = paging
    with get_db(settings) as db:
        employees, pagination = employee_service(db).list_employees(spec, page, per_page)
    return {
        "data": [e.to_dict() for e in employees],
        "pagination": pagination.to_dict(),
    }


@router.get("/{employee_id}")
async def get_employee(request: Request, employee_id: int):
    with get_db(get_settings(request)) as db:
        employee = employee_service(db).get_employee(employee_id)
    return {"data": employee.to_dict()}


@router.post("", status_code=201)
async def create_employee(request: Request, body: EmployeeCreate):
    with get_db(get_settings(request)) as db:
        employee = employee_service(db).create_employee(body)
    return {"message": "Employee created successfully", "data": employee.to_dict()}


@router.put("/{employee_id}")
@router.patch("/{employee_id}")
async def update_employee(request: Request, employee_id: int, body: EmployeeUpdate):
    with get_db(get_settings(request)) as db:
        employee = employee_service(db).update_employee(employee_id, body)
    return {"message": "Employee updated successfully", "data": employee.to_dict()}


@router.delete("/{employee_id}")
async def delete_employee(request: Request, employee_id: int):
    with get_db(get_settings(request)) as db:
        employee_service(db).delete_employee(employee_id)
    return {"message": "Employee deleted successfully"}
