"""Tag service and the smart tag resolver.

A smart tag list mixes tag IDs and tag names, e.g. ``[1, "New Tag", "2"]``.
IDs pass through untouched; names are matched case-insensitively against
existing tags and created when missing.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional

from cateringapi.errors import (
    CateringError,
    DuplicateResourceError,
    NotFoundError,
    ResourceInUseError,
    StorageError,
)
from cateringapi.search.pagination import PaginationResult, plan_page
from cateringapi.storage.database import Database
from cateringapi.storage.models import Tag
from cateringapi.storage.repository import TagRepository, tag_key

log = logging.getLogger(__name__)


def as_tag_id(value) -> Optional[int]:
    """Return the tag ID an input denotes, or None if it is not ID-like."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def resolve_smart_tags(
    inputs: Iterable,
    find_by_name: Callable[[str], Optional[Tag]],
    create_tag: Callable[[str], int],
) -> set[int]:
    """Resolve mixed tag IDs and names to a set of tag IDs.

    IDs are not checked for existence here. A name that cannot be
    resolved (blank, or lost to a concurrent create that then vanished)
    is logged and skipped; a StorageError from either callable propagates.
    """
    resolved: set[int] = set()
    by_name: dict[str, int] = {}

    for item in inputs:
        tag_id = as_tag_id(item)
        if tag_id is not None:
            if tag_id > 0:
                resolved.add(tag_id)
            else:
                log.warning(f"Skipping non-positive tag ID {tag_id}")
            continue

        if not isinstance(item, str) or not item.strip():
            log.warning(f"Skipping unusable tag input {item!r}")
            continue

        name = item.strip()
        key = tag_key(name)
        if key in by_name:
            resolved.add(by_name[key])
            continue

        try:
            tag_id = _find_or_create(name, find_by_name, create_tag)
        except StorageError:
            raise
        except CateringError as e:
            log.warning(f"Skipping tag '{name}': {e}")
            continue

        by_name[key] = tag_id
        resolved.add(tag_id)

    return resolved


def _find_or_create(name, find_by_name, create_tag) -> int:
    existing = find_by_name(name)
    if existing is not None:
        return existing.id
    try:
        tag_id = create_tag(name)
    except DuplicateResourceError:
        # Created by someone else between lookup and insert
        existing = find_by_name(name)
        if existing is None:
            raise
        return existing.id
    log.info(f"Created tag '{name}' (id={tag_id})")
    return tag_id


class TagService:
    def __init__(self, db: Database):
        self.db = db
        self.repo = TagRepository(db)

    def list_tags(self, page: int, per_page: int) -> tuple[list[Tag], PaginationResult]:
        pagination, offset, limit = plan_page(self.repo.count(), page, per_page)
        return self.repo.query(limit, offset), pagination

    def get_tag(self, id: int) -> Tag:
        tag = self.repo.find_by_id(id)
        if tag is None:
            raise NotFoundError("Tag", id)
        return tag

    def find_by_name(self, name: str) -> Optional[Tag]:
        return self.repo.find_by_name(name)

    def tags_for_facility(self, facility_id: int) -> list[Tag]:
        return self.repo.find_by_facility_id(facility_id)

    def create_tag(self, name: str) -> Tag:
        """Create a tag from an already validated name."""
        if not self.repo.is_name_unique(name):
            raise DuplicateResourceError("Tag", "name", name)
        with self.db.transaction():
            tag_id = self.repo.create(name)
        return Tag(id=tag_id, name=name)

    def update_tag(self, id: int, name: str) -> Tag:
        self.get_tag(id)
        if not self.repo.is_name_unique(name, exclude_id=id):
            raise DuplicateResourceError("Tag", "name", name)
        with self.db.transaction():
            self.repo.update(id, name)
        return Tag(id=id, name=name)

    def delete_tag(self, id: int):
        self.get_tag(id)
        if self.repo.is_used_by_facilities(id):
            raise ResourceInUseError("tag", id, "facilities")
        with self.db.transaction():
            self.repo.delete(id)
        log.info(f"Deleted tag {id}")

    def resolve(self, inputs: Iterable) -> set[int]:
        """Smart tag resolution against this database.

        Must run inside the caller's transaction so new tags are
        committed (or rolled back) with the entity that uses them.
        """
        return resolve_smart_tags(inputs, self.repo.find_by_name, self.repo.create)

    def ensure_exist(self, tag_ids: Iterable[int]):
        tag_ids = set(tag_ids)
        missing = sorted(tag_ids - self.repo.existing_ids(tag_ids))
        if missing:
            raise NotFoundError("Tag", ", ".join(str(m) for m in missing))
