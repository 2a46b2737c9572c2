"""API index and health check. Neither requires a token."""

from __future__ import annotations

from fastapi import APIRouter

from cateringapi.config import API_NAME, API_VERSION

router = APIRouter()

ENDPOINTS = {
    "facilities": {
        "GET /facilities": "List facilities (pagination, search, filter)",
        "GET /facilities/{id}": "Get a facility by ID",
        "POST /facilities": "Create a facility",
        "PUT /facilities/{id}": "Update a facility",
        "PATCH /facilities/{id}": "Partially update a facility",
        "DELETE /facilities/{id}": "Delete a facility",
    },
    "locations": {
        "GET /locations": "List locations (pagination)",
        "GET /locations/{id}": "Get a location by ID",
        "GET /locations/{id}/facilities": "List the facilities at a location",
        "POST /locations": "Create a location",
        "PUT /locations/{id}": "Update a location",
        "PATCH /locations/{id}": "Partially update a location",
        "DELETE /locations/{id}": "Delete a location",
    },
    "tags": {
        "GET /tags": "List tags (pagination)",
        "GET /tags/{id}": "Get a tag by ID",
        "POST /tags": "Create a tag",
        "PUT /tags/{id}": "Update a tag",
        "PATCH /tags/{id}": "Partially update a tag",
        "DELETE /tags/{id}": "Delete a tag",
    },
    "employees": {
        "GET /employees": "List employees (pagination, search, filter)",
        "GET /employees/{id}": "Get an employee by ID",
        "POST /employees": "Create an employee",
        "PUT /employees/{id}": "Update an employee",
        "PATCH /employees/{id}": "Partially update an employee",
        "DELETE /employees/{id}": "Delete an employee",
    },
    "health": {"GET /health": "API health check"},
}


@router.get("/")
async def api_index():
    return {
        "api_name": API_NAME,
        "version": API_VERSION,
        "authentication": {"type": "JWT Bearer Token"},
        "endpoints": ENDPOINTS,
        "features": {
            "Pagination": "page & per_page query parameters",
            "Search": "query parameter, scoped with filter=field1,field2",
            "Filter": "field-specific values combined with operator=AND|OR",
        },
    }


@router.get("/health")
async def health():
    return {"status": "ok"}
