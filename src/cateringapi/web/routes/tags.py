"""Tag routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from cateringapi.schemas import TagBody
from cateringapi.web.auth import require_auth
from cateringapi.web.deps import get_db, get_settings, tag_service
from cateringapi.web.params import page_params

router = APIRouter(prefix="/tags", dependencies=[Depends(require_auth)])


@router.get("")
async def list_tags(request: Request, paging: tuple[int, int] = Depends(page_params)):
    settings = get_settings(request)
    page, per_page = paging
    with get_db(settings) as db:
        tags, pagination = tag_service(db).list_tags(page, per_page)
    return {"tags": [t.to_dict() for t in tags], "pagination": pagination.to_dict()}


@router.get("/{tag_id}")
async def get_tag(request: Request, tag_id: int):
    with get_db(get_settings(request)) as db:
        tag = tag_service(db).get_tag(tag_id)
    return {"tag": tag.to_dict()}


@router.post("", status_code=201)
async def create_tag(request: Request, body: TagBody):
    with get_db(get_settings(request)) as db:
        tag = tag_service(db).create_tag(body.name)
    return {"message": "Tag created successfully", "tag": tag.to_dict()}


@router.put("/{tag_id}")
@router.patch("/{tag_id}")
async def update_tag(request: Request, tag_id: int, body: TagBody):
    with get_db(get_settings(request)) as db:
        tag = tag_service(db).update_tag(tag_id, body.name)
    return {"message": "Tag updated successfully", "tag": tag.to_dict()}


@router.delete("/{tag_id}")
async def delete_tag(request: Request, tag_id: int):
    with get_db(get_settings(request)) as db:
        tag_service(db).delete_tag(tag_id)
    return {"message": "Tag deleted successfully"}
