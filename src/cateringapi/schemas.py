"""Request bodies.

Create bodies require every column. Update bodies (used for PUT and PATCH)
accept any subset but must carry at least one field. Strings are stripped
before their constraints are checked.
"""

from __future__ import annotations

import re
from typing import Annotated, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

NAME_MAX = 255

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _country_code(value: str) -> str:
    if len(value) != 2 or not value.isascii() or not value.isalpha():
        raise ValueError("Country code must be a two-letter code")
    return value.upper()


def _email(value: str) -> str:
    if not EMAIL_RE.match(value):
        raise ValueError("Invalid email format")
    return value


Text = Annotated[str, Field(min_length=1, max_length=NAME_MAX)]
CountryCode = Annotated[str, AfterValidator(_country_code)]
Email = Annotated[str, Field(max_length=NAME_MAX), AfterValidator(_email)]
PositiveId = Annotated[int, Field(gt=0)]


class _Body(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)

    def present(self, *names: str) -> dict:
        """Values of the named fields that were given."""
        return {n: getattr(self, n) for n in names if getattr(self, n) is not None}


class _UpdateBody(_Body):
    @model_validator(mode="after")
    def needs_a_field(self):
        if all(v is None for v in self.model_dump().values()):
            raise ValueError("At least one field is required")
        return self


# ── Locations ──────────────────────────────────────────────────────


class LocationCreate(_Body):
    city: Text
    address: Text
    zip_code: Text
    country_code: CountryCode
    phone_number: Text


class LocationUpdate(_UpdateBody):
    city: Optional[Text] = None
    address: Optional[Text] = None
    zip_code: Optional[Text] = None
    country_code: Optional[CountryCode] = None
    phone_number: Optional[Text] = None


# ── Tags ───────────────────────────────────────────────────────────


class TagBody(_Body):
    name: Text


# ── Facilities ─────────────────────────────────────────────────────


class _FacilityTags(_Body):
    """Smart tags as one ``tags`` list or the legacy ``tagIds``/``tagNames`` pair."""

    tag_ids: Optional[list[PositiveId]] = Field(None, alias="tagIds")
    tag_names: Optional[list[Text]] = Field(None, alias="tagNames")
    tags: Optional[list[Union[int, str]]] = None

    @field_validator("tags")
    @classmethod
    def one_tag_form(cls, value, info: ValidationInfo):
        if value is None:
            return value
        if info.data.get("tag_ids") is not None or info.data.get("tag_names") is not None:
            raise ValueError("Use either 'tags' or 'tagIds'/'tagNames', not both")
        if any(isinstance(t, str) and len(t.strip()) > NAME_MAX for t in value):
            raise ValueError(f"Tag names must be at most {NAME_MAX} characters")
        return value

    def tag_inputs(self) -> Optional[list]:
        """The smart tag list given, or None when the body has none.

        The legacy pair is merged IDs first, then names.
        """
        if self.tags is not None:
            return list(self.tags)
        if self.tag_ids is None and self.tag_names is None:
            return None
        return [*(self.tag_ids or []), *(self.tag_names or [])]


class FacilityCreate(_FacilityTags):
    name: Text
    location_id: PositiveId


class FacilityUpdate(_FacilityTags, _UpdateBody):
    name: Optional[Text] = None
    location_id: Optional[PositiveId] = None


# ── Employees ──────────────────────────────────────────────────────


class EmployeeCreate(_Body):
    name: Text
    address: Text
    phone: Text
    email: Email
    facility_ids: Optional[list[PositiveId]] = Field(None, alias="facilityIds")


class EmployeeUpdate(_UpdateBody):
    name: Optional[Text] = None
    address: Optional[Text] = None
    phone: Optional[Text] = None
    email: Optional[Email] = None
    facility_ids: Optional[list[PositiveId]] = Field(None, alias="facilityIds")
