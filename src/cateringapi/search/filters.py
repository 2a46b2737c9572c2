"""Filter specifications and the WHERE-clause compiler.

A FilterSpecification describes one search request: an optional free-text
query, the fields that query should match, explicit per-field values and
the operator joining everything together. compile_where() turns it into a
parameterised SQL predicate. Only trusted column names from the field map
and placeholder names derived from known field names are written into the
clause; every user value travels through the binds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from cateringapi.config import (
    EMPLOYEE_DEFAULT_QUERY_FIELDS,
    EMPLOYEE_FILTER_FIELDS,
    FACILITY_DEFAULT_QUERY_FIELDS,
    FACILITY_FILTER_FIELDS,
)
from cateringapi.errors import ValidationError

MATCH_ALL = "1"


class Operator(str, Enum):
    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Operator":
        """Parse a user-supplied operator. Missing means AND."""
        if value is None or (isinstance(value, str) and value.strip() == ""):
            return cls.AND
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().upper()
        try:
            return cls(normalized)
        except ValueError:
            raise ValidationError(
                {"operator": "Invalid operator. Only 'AND' or 'OR' are allowed."}
            ) from None


@dataclass(frozen=True)
class EntityFields:
    """Searchable fields of one entity and the columns behind them."""

    name: str
    field_map: Mapping[str, str]
    default_query_fields: tuple[str, ...]

    @property
    def allowed(self) -> tuple[str, ...]:
        return tuple(self.field_map)


FACILITY_FIELDS = EntityFields(
    name="facility",
    field_map=MappingProxyType(dict(zip(FACILITY_FILTER_FIELDS, ("f.name", "l.city", "t.name")))),
    default_query_fields=FACILITY_DEFAULT_QUERY_FIELDS,
)

EMPLOYEE_FIELDS = EntityFields(
    name="employee",
    field_map=MappingProxyType(
        dict(
            zip(
                EMPLOYEE_FILTER_FIELDS,
                ("e.name", "e.email", "e.phone", "e.address", "f.name", "l.city"),
            )
        )
    ),
    default_query_fields=EMPLOYEE_DEFAULT_QUERY_FIELDS,
)


@dataclass(frozen=True)
class FilterSpecification:
    free_text_query: Optional[str] = None
    field_filters: frozenset[str] = frozenset()
    field_values: Mapping[str, str] = field(default_factory=dict)
    operator: Operator = Operator.AND

    @classmethod
    def build(
        cls,
        allowed: tuple[str, ...],
        query: Optional[str] = None,
        filters=(),
        values: Optional[Mapping[str, Optional[str]]] = None,
        operator: Optional[str] = None,
    ) -> "FilterSpecification":
        """Validate raw request input against an allow-list.

        Unknown filter or value fields and a bad operator are collected
        into a single ValidationError. Blank strings count as absent.
        """
        errors = {}

        filter_names = [f.strip() for f in filters if f and f.strip()]
        invalid = [f for f in filter_names if f not in allowed]
        if invalid:
            errors["filter"] = (
                f"Invalid filter: {', '.join(invalid)}. Allowed: {', '.join(allowed)}"
            )

        clean_values = {}
        for name, value in (values or {}).items():
            if name not in allowed:
                errors[name] = f"Unknown filter field '{name}'. Allowed: {', '.join(allowed)}"
                continue
            if value is not None and str(value).strip():
                clean_values[name] = str(value).strip()

        try:
            parsed_operator = Operator.parse(operator)
        except ValidationError as e:
            errors.update(e.errors)
            parsed_operator = Operator.AND

        if errors:
            raise ValidationError(errors)

        query = query.strip() if query else None
        return cls(
            free_text_query=query or None,
            field_filters=frozenset(filter_names),
            field_values=MappingProxyType(clean_values),
            operator=parsed_operator,
        )

    @property
    def is_empty(self) -> bool:
        return not self.free_text_query and not any(self.field_values.values())


@dataclass(frozen=True)
class CompiledPredicate:
    clause: str
    binds: Mapping[str, str] = field(default_factory=dict)

    @property
    def matches_all(self) -> bool:
        return self.clause == MATCH_ALL

    def params(self) -> dict[str, str]:
        """Binds keyed the way sqlite3 named parameters expect (no colon)."""
        return {name.lstrip(":"): value for name, value in self.binds.items()}


def compile_where(
    field_map: Mapping[str, str],
    spec: FilterSpecification,
    default_query_fields: tuple[str, ...] = (),
) -> CompiledPredicate:
    """Compile a FilterSpecification into a parameterised predicate.

    Field values become ``<column> LIKE :<field>``. A free-text query
    becomes one parenthesised OR group over the filter fields (or the
    defaults) sharing the ``:query`` placeholder. Conditions are joined
    with the operator; with no conditions the clause is "1".
    A field value and a free-text query on the same column are both
    emitted, so AND can narrow the result to nothing.
    """
    unknown = [name for name in spec.field_values if name not in field_map]
    if unknown:
        raise ValueError(f"Fields not in field map: {', '.join(sorted(unknown))}")

    conditions = []
    binds = {}

    for name, column in field_map.items():
        value = spec.field_values.get(name)
        if not value:
            continue
        placeholder = f":{name}"
        conditions.append(f"{column} LIKE {placeholder}")
        binds[placeholder] = f"%{value}%"

    if spec.free_text_query:
        targets = spec.field_filters or frozenset(default_query_fields)
        query_conditions = [
            f"{column} LIKE :query"
            for name, column in field_map.items()
            if name in targets
        ]
        if query_conditions:
            conditions.append("(" + " OR ".join(query_conditions) + ")")
            binds[":query"] = f"%{spec.free_text_query}%"

    if not conditions:
        return CompiledPredicate(MATCH_ALL, {})

    operator = Operator(spec.operator).value
    return CompiledPredicate(f" {operator} ".join(conditions), binds)


def compile_for(entity: EntityFields, spec: FilterSpecification) -> CompiledPredicate:
    return compile_where(entity.field_map, spec, entity.default_query_fields)
