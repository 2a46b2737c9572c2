"""Error taxonomy shared by the storage, service and web layers."""

from __future__ import annotations


class CateringError(Exception):
    """Base class for all application errors."""

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(CateringError):
    """Malformed or disallowed input, reported per field."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, errors: dict[str, str] | str):
        if isinstance(errors, str):
            errors = {"error": errors}
        self.errors = dict(errors)
        super().__init__("Validation failed", {"errors": self.errors})


class NotFoundError(CateringError):
    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource: str, identifier):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            f"{resource} with ID '{identifier}' not found",
            {"resource_type": resource, "identifier": identifier},
        )


class ResourceInUseError(CateringError):
    """Deletion blocked by a dependent entity."""

    error_code = "RESOURCE_IN_USE"

    def __init__(self, resource: str, identifier, used_by: str):
        super().__init__(
            f"This {resource} cannot be deleted because it is currently "
            f"in use by related {used_by}.",
            {"resource_type": resource, "resource_id": identifier, "used_by": used_by},
        )


class DuplicateResourceError(CateringError):
    error_code = "DUPLICATE_RESOURCE"

    def __init__(self, resource: str, field: str, value):
        self.field = field
        self.value = value
        super().__init__(
            f"{resource} with {field} '{value}' already exists",
            {"resource_type": resource, "field": field, "value": value},
        )


class StorageError(CateringError):
    """The database failed. The cause is logged, never sent to clients."""

    error_code = "DATABASE_ERROR"

    def __init__(self, operation: str, table: str, details: str | None = None):
        message = f"Database operation failed: {operation} on {table}"
        if details:
            message += f" - {details}"
        super().__init__(
            message,
            {"operation": operation, "table": table, "details": details},
        )


class UnauthorizedError(CateringError):
    error_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)
