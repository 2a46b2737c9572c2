"""Route registration for the Catering API."""

from __future__ import annotations

from fastapi import FastAPI


def register_routes(app: FastAPI):
    """Include all route modules."""
    from cateringapi.web.routes import employees, facilities, index, locations, tags

    app.include_router(index.router)
    app.include_router(locations.router)
    app.include_router(tags.router)
    app.include_router(facilities.router)
    app.include_router(employees.router)
