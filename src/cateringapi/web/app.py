"""FastAPI application factory for the Catering API."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from cateringapi.config import API_NAME, API_VERSION, Settings, load_settings
from cateringapi.errors import (
    CateringError,
    DuplicateResourceError,
    NotFoundError,
    ResourceInUseError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)

log = logging.getLogger(__name__)


def _validation_body(errors: dict) -> dict:
    return {
        "error": "Validation failed",
        "error_type": "validation_error",
        "validation_errors": errors,
    }


def _request_errors(exc: RequestValidationError) -> dict:
    """Flatten pydantic errors to ``{field: message}``."""
    errors = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        msg = err.get("msg", "Invalid value").removeprefix("Value error, ")
        errors.setdefault(".".join(loc) or "body", msg)
    return errors


def register_error_handlers(app: FastAPI):
    """Map application errors onto HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content=_validation_body(exc.errors))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content=_validation_body(_request_errors(exc)))

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content={
                "error": exc.message,
                "error_type": "resource_not_found",
                "error_code": exc.error_code,
            },
        )

    async def business_rule(request: Request, exc: CateringError):
        content = {
            "error": exc.message,
            "error_type": "business_rule_violation",
            "error_code": exc.error_code,
        }
        if app.state.settings.is_development:
            content["details"] = exc.context
        return JSONResponse(status_code=400, content=content)

    app.add_exception_handler(ResourceInUseError, business_rule)
    app.add_exception_handler(DuplicateResourceError, business_rule)

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        request_id = getattr(request.state, "request_id", None) or uuid.uuid4().hex[:12]
        log.error(f"[{request_id}] {exc.message}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "An internal error occurred",
                "error_type": "internal_error",
                "error_code": exc.error_code,
                "request_id": request_id,
            },
        )

    @app.exception_handler(UnauthorizedError)
    async def unauthorized(request: Request, exc: UnauthorizedError):
        return JSONResponse(
            status_code=401,
            content={"error": exc.message, "error_type": "unauthorized"},
            headers={"WWW-Authenticate": "Bearer"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or load_settings()
    app = FastAPI(title=API_NAME, version=API_VERSION)
    app.state.settings = settings

    if settings.uses_dev_secret:
        log.warning("CATERING_JWT_SECRET is not set; using the development secret")

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request.state.request_id = uuid.uuid4().hex[:12]
        start = time.time()
        response = await call_next(request)
        duration = (time.time() - start) * 1000
        log.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({duration:.1f}ms) [{request.state.request_id}]"
        )
        response.headers["X-Request-ID"] = request.state.request_id
        return response

    register_error_handlers(app)

    from cateringapi.web.routes import register_routes

    register_routes(app)

    return app
