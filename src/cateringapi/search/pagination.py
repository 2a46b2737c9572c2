"""Pagination arithmetic for list endpoints."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass

from cateringapi.errors import ValidationError


@dataclass(frozen=True)
class PaginationResult:
    current_page: int
    per_page: int
    total_items: int
    total_pages: int

    def to_dict(self) -> dict:
        return asdict(self)


def _check_page_args(page, per_page):
    errors = {}
    for name, value in (("page", page), ("per_page", per_page)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            errors[name] = f"{name} must be a positive integer"
    if errors:
        raise ValidationError(errors)


def paginate(total_items: int, page: int, per_page: int) -> PaginationResult:
    """Build pagination metadata. Zero items means zero pages.

    Does not check page against total_pages; callers do that after the
    count query with ensure_page_in_range().
    """
    _check_page_args(page, per_page)
    if total_items < 0:
        raise ValidationError({"total_items": "Total items cannot be negative"})

    total_pages = 0 if total_items == 0 else math.ceil(total_items / per_page)
    return PaginationResult(
        current_page=page,
        per_page=per_page,
        total_items=total_items,
        total_pages=total_pages,
    )


def to_offset_limit(page: int, per_page: int) -> tuple[int, int]:
    _check_page_args(page, per_page)
    return (page - 1) * per_page, per_page


def ensure_page_in_range(result: PaginationResult) -> PaginationResult:
    if result.total_pages > 0 and result.current_page > result.total_pages:
        raise ValidationError(
            {
                "page": (
                    f"The requested page ({result.current_page}) exceeds the "
                    f"total number of pages ({result.total_pages})."
                )
            }
        )
    return result


def plan_page(total_items: int, page: int, per_page: int) -> tuple[PaginationResult, int, int]:
    """Metadata plus (offset, limit) for one page, rejecting pages past the end."""
    result = ensure_page_in_range(paginate(total_items, page, per_page))
    offset, limit = to_offset_limit(page, per_page)
    return result, offset, limit
