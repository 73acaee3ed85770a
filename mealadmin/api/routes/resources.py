"""CRUD + list-view routes shared by every resource type (/api/discounts, /api/taxes, ...)."""
import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Query, Request
from pydantic import ValidationError

from mealadmin.domain.Resource_Type import RESOURCE_TYPES, UnknownResourceType, get_resource_type
from mealadmin.logic.listing.comparators import SortDirection, parse_direction
from mealadmin.logic.listing.pipeline import PageState, SortState
from mealadmin.logic.resources.service import ResourceService
from mealadmin.utilities.config import DEFAULT_ITEMS_PER_PAGE, ITEMS_PER_PAGE_OPTIONS
from mealadmin.utilities.validators import INPUT_SCHEMAS

router = APIRouter(prefix="/api")


def _service(request: Request, resource: str) -> ResourceService:
    try:
        rt = get_resource_type(resource)
    except UnknownResourceType as e:
        raise HTTPException(status_code=404, detail=str(e))
    return request.app.state.services[rt.key]


def _validated(schema, payload: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
    try:
        model = schema.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=json.loads(e.json()))
    return model.model_dump(exclude_unset=partial)


@router.get("/resources")
def list_resource_types():
    """Catalogue used by the front end to build headers, search hints and the page-size select."""
    return {
        "resources": [rt.to_dict() for rt in RESOURCE_TYPES.values()],
        "items_per_page_options": list(ITEMS_PER_PAGE_OPTIONS),
        "default_items_per_page": DEFAULT_ITEMS_PER_PAGE,
    }


@router.get("/{resource}")
async def list_view(
    request: Request,
    resource: str,
    q: str = Query(default=""),
    sort: Optional[str] = Query(default=None),
    direction: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=DEFAULT_ITEMS_PER_PAGE, ge=1),
):
    service = _service(request, resource)
    try:
        sort_direction = parse_direction(direction)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid sort direction: {direction}")
    sort_state = SortState()
    if sort:
        if sort_direction is SortDirection.NONE and direction is None:
            sort_direction = SortDirection.ASC
        sort_state = SortState(service.resource_type.field(sort), sort_direction)
    view = await service.list_view(q, sort_state, PageState(page, per_page))
    data = view.to_dict()
    data["resource"] = service.resource_type.key
    data["stale_page"] = view.is_stale
    return data


@router.get("/{resource}/next-id")
async def next_id(request: Request, resource: str):
    service = _service(request, resource)
    return {"display_id": await service.next_display_id()}


@router.get("/{resource}/{internal_id}")
async def get_record(request: Request, resource: str, internal_id: str):
    record = await _service(request, resource).get_record(internal_id)
    return record.to_dict()


@router.post("/{resource}", status_code=201)
async def create_record(request: Request, resource: str, payload: Dict[str, Any] = Body(...)):
    service = _service(request, resource)
    create_schema, _ = INPUT_SCHEMAS[service.resource_type.key]
    record = await service.create_record(_validated(create_schema, payload))
    return record.to_dict()


@router.put("/{resource}/{internal_id}")
async def update_record(request: Request, resource: str, internal_id: str, payload: Dict[str, Any] = Body(...)):
    service = _service(request, resource)
    _, update_schema = INPUT_SCHEMAS[service.resource_type.key]
    record = await service.update_record(internal_id, _validated(update_schema, payload, partial=True))
    return record.to_dict()


@router.delete("/{resource}/{internal_id}")
async def delete_record(request: Request, resource: str, internal_id: str):
    await _service(request, resource).delete_record(internal_id)
    return {"success": True}


@router.post("/{resource}/{internal_id}/toggle-active")
async def toggle_active(request: Request, resource: str, internal_id: str):
    record = await _service(request, resource).toggle_active(internal_id)
    return record.to_dict()
