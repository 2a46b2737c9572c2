"""Facility routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from cateringapi.schemas import FacilityCreate, FacilityUpdate
from cateringapi.search.filters import FACILITY_FIELDS
from cateringapi.web.auth import require_auth
from cateringapi.web.deps import facility_service, get_db, get_settings
from cateringapi.web.params import build_filter_spec, page_params

router = APIRouter(prefix="/facilities", dependencies=[Depends(require_auth)])


@router.get("")
async def list_facilities(request: Request, paging: tuple[int, int] = Depends(page_params)):
    """List facilities with search, field filters and pagination."""
    settings = get_settings(request)
    spec = build_filter_spec(FACILITY_FIELDS, request.query_params)
    page, per_page = paging
    with get_db(settings) as db:
        facilities, pagination = facility_service(db).list_facilities(spec, page, per_page)
    return {
        "facilities": [f.to_dict() for f in facilities],
        "pagination": pagination.to_dict(),
    }


@router.get("/{facility_id}")
async def get_facility(request: Request, facility_id: int):
    with get_db(get_settings(request)) as db:
        facility = facility_service(db).get_facility(facility_id)
    return {"facility": facility.to_dict()}


@router.post("", status_code=201)
async def create_facility(request: Request, body: FacilityCreate):
    with get_db(get_settings(request)) as db:
        facility = facility_service(db).create_facility(body)
    return {"message": "Facility created successfully", "facility": facility.to_dict()}


@router.put("/{facility_id}")
@router.patch("/{facility_id}")
async def update_facility(request: Request, facility_id: int, body: FacilityUpdate):
    with get_db(get_settings(request)) as db:
        facility = facility_service(db).update_facility(facility_id, body)
    return {"message": "Facility updated successfully", "facility": facility.to_dict()}


@router.delete("/{facility_id}")
async def delete_facility(request: Request, facility_id: int):
    with get_db(get_settings(request)) as db:
        facility_service(db).delete_facility(facility_id)
    return {"message": "Facility deleted successfully"}
