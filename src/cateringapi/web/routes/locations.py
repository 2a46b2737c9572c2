"""Location routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from cateringapi.schemas import LocationCreate, LocationUpdate
from cateringapi.web.auth import require_auth
from cateringapi.web.deps import facility_service, get_db, get_settings, location_service
from cateringapi.web.params import page_params

router = APIRouter(prefix="/locations", dependencies=[Depends(require_auth)])


@router.get("")
async def list_locations(request: Request, paging: tuple[int, int] = Depends(page_params)):
    settings = get_settings(request)
    page, per_page = paging
    with get_db(settings) as db:
        locations, pagination = location_service(db).list_locations(page, per_page)
    return {
        "locations": [loc.to_dict() for loc in locations],
        "pagination": pagination.to_dict(),
    }


@router.get("/{location_id}")
async def get_location(request: Request, location_id: int):
    with get_db(get_settings(request)) as db:
        location = location_service(db).get_location(location_id)
    return {"location": location.to_dict()}


@router.get("/{location_id}/facilities")
async def location_facilities(request: Request, location_id: int):
    with get_db(get_settings(request)) as db:
        facilities = facility_service(db).facilities_by_location(location_id)
    return {"facilities": [f.to_dict() for f in facilities]}


@router.post("", status_code=201)
async def create_location(request: Request, body: LocationCreate):
    with get_db(get_settings(request)) as db:
        location = location_service(db).create_location(body)
    return {"message": "Location created successfully", "location": location.to_dict()}


@router.put("/{location_id}")
@router.patch("/{location_id}")
async def update_location(request: Request, location_id: int, body: LocationUpdate):
    with get_db(get_settings(request)) as db:
        location = location_service(db).update_location(location_id, body)
    return {"message": "Location updated successfully", "location": location.to_dict()}


@router.delete("/{location_id}")
async def delete_location(request: Request, location_id: int):
    with get_db(get_settings(request)) as db:
        location_service(db).delete_location(location_id)
    return {"message": "Location deleted successfully"}
