"""Declared document schemas and the single validation entry point.

Each document kind has a schema listing its wire fields. ``validate()``
checks a raw ``data`` mapping against the schema for a given type and
returns a tagged result: ``Valid`` wrapping the typed model, or ``Invalid``
with a human-readable reason. Callers branch on the tag; nothing here raises
for malformed input.

Normalized types validate into their entity models. View types validate into
the read-side projection served to callers (no ``id``, every projected field
a non-empty string), since stored view rows are only ever read back.

The ``type`` discriminator itself is not checked: the store already selected
documents by type, and seed files may omit it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

from hrviews.models import (
    City,
    Division,
    DocType,
    Document,
    Employee,
    EmployeeCityRow,
    EmployeePositionRow,
    Position,
    ViewProjection,
)

T = TypeVar("T")


@dataclass(frozen=True)
class Field:
    """One wire field: camelCase key, model attribute, required and non-empty flags."""

    key: str
    attr: str
    required: bool = True
    non_empty: bool = False


@dataclass(frozen=True)
class Schema:
    fields: tuple[Field, ...]
    build: Callable[..., Union[Document, ViewProjection]]


@dataclass(frozen=True)
class Valid(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    reason: str


ValidationResult = Union[Valid[Document], Valid[ViewProjection], Invalid]


def _fields(*specs: tuple[str, str] | tuple[str, str, bool]) -> tuple[Field, ...]:
    return tuple(Field(*spec) for spec in specs)


def _projected(*specs: tuple[str, str]) -> tuple[Field, ...]:
    return tuple(Field(key, attr, non_empty=True) for key, attr in specs)


# All fields are strings; optional ones must still be strings when present.
SCHEMAS: dict[DocType, Schema] = {
    DocType.CITY: Schema(_fields(("id", "id"), ("name", "name")), City),
    DocType.DIVISION: Schema(
        _fields(("id", "id"), ("name", "name"), ("cityId", "city_id")), Division
    ),
    DocType.POSITION: Schema(_fields(("id", "id"), ("name", "name")), Position),
    DocType.EMPLOYEE: Schema(
        _fields(
            ("id", "id"),
            ("firstName", "first_name"),
            ("lastName", "last_name", False),
            ("divisionId", "division_id"),
            ("cityId", "city_id"),
            ("positionId", "position_id"),
        ),
        Employee,
    ),
    DocType.EMPLOYEE_WITH_CITY_VIEW: Schema(
        _projected(("firstName", "first_name"), ("city", "city")),
        EmployeeCityRow,
    ),
    DocType.EMPLOYEE_WITH_POSITION_VIEW: Schema(
        _projected(
            ("firstName", "first_name"),
            ("position", "position"),
            ("division", "division"),
        ),
        EmployeePositionRow,
    ),
}


def validate(doc_type: DocType, data: Any) -> ValidationResult:
    """Check *data* against the declared schema for *doc_type*.

    Args:
        doc_type: The document kind the data is expected to be.
        data: Raw ``data`` payload from a store record (any JSON value).

    Returns:
        ``Valid`` holding the typed model, or ``Invalid`` with the first
        problem found.
    """
    if not isinstance(data, dict):
        return Invalid(f"expected an object, got {type(data).__name__}")

    schema = SCHEMAS[doc_type]
    kwargs: dict[str, str] = {}
    for field in schema.fields:
        if field.key not in data or data[field.key] is None:
            if field.required:
                return Invalid(f"missing required field '{field.key}'")
            continue
        value = data[field.key]
        if not isinstance(value, str):
            return Invalid(
                f"field '{field.key}' must be a string, got {type(value).__name__}"
            )
        if field.non_empty and not value:
            return Invalid(f"field '{field.key}' must not be empty")
        kwargs[field.attr] = value

    return Valid(schema.build(**kwargs))
