"""Turn query-string parameters into filter and pagination values.

The filter builder takes the query parameters as an explicit mapping and
never looks at the request itself.
"""

from __future__ import annotations

from typing import Mapping, Optional

from fastapi import Query, Request

from cateringapi.errors import ValidationError
from cateringapi.search.filters import EntityFields, FilterSpecification
from cateringapi.web.deps import get_settings


def _split_filters(params: Mapping) -> list[str]:
    if hasattr(params, "getlist"):
        raw = params.getlist("filter")
    else:
        value = params.get("filter")
        raw = [value] if value else []
    names = []
    for item in raw:
        names.extend(part.strip() for part in item.split(",") if part.strip())
    return names


def build_filter_spec(entity: EntityFields, params: Mapping) -> FilterSpecification:
    """Build a validated FilterSpecification from query parameters.

    Recognised keys: ``query``, ``filter`` (comma list, may repeat),
    ``operator`` and one key per allowed field of the entity.
    """
    values = {name: params.get(name) for name in entity.allowed if params.get(name) is not None}
    return FilterSpecification.build(
        entity.allowed,
        query=params.get("query"),
        filters=_split_filters(params),
        values=values,
        operator=params.get("operator"),
    )


def page_params(
    request: Request,
    page: int = Query(1, ge=1, description="Page number"),
    per_page: Optional[int] = Query(None, ge=1, description="Results per page"),
) -> tuple[int, int]:
    """Dependency returning (page, per_page).

    per_page defaults to the configured size and may not exceed the
    configured maximum.
    """
    settings = get_settings(request)
    per_page = per_page or settings.default_per_page
    if per_page > settings.max_per_page:
        raise ValidationError({"per_page": f"per_page cannot exceed {settings.max_per_page}"})
    return page, per_page
