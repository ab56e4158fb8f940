"""Pet Validation — checks a proposed field set against the entity schema before any write.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Create: every required column must be present (absent → MissingFieldError)
    - Update: only present columns are checked (partial update)
    - Present with an illegal value → InvalidValueError naming the column
    - System-assigned columns (_id) and unknown columns are never accepted
    - Columns are checked in schema order — first error wins
    - Ok value is a normalized copy: integers coerced, input mapping untouched

Design Decisions:
    - Driven by PET_SCHEMA ColumnSpecs instead of one hand-written check per column
    - Result over exceptions: tests and batch callers inspect, the provider raises
    - Numeric strings ("7") accepted for integer columns; bool is never an integer
"""

import re
from typing import Any

from pet_provider.core.domain_types import ContentValues
from pet_provider.core.errors import InvalidValueError, MissingFieldError
from pet_provider.core.pet_contract import (
    PET_SCHEMA, ColumnSpec, ColumnType, EntitySchema,
)
from pet_provider.core.result import Err, Ok, Result

_INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


def _coerce_integer(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_TEXT.fullmatch(value.strip()):
        return int(value.strip())
    return None


def check_value(spec: ColumnSpec, value: Any) -> Result[Any]:
    """Check a single present value against its column spec."""
    if value is None:
        if spec.nullable:
            return Ok(None)
        return Err(InvalidValueError(spec.name, "must not be null"))

    if spec.type == ColumnType.INTEGER:
        number = _coerce_integer(value)
        if number is None:
            return Err(InvalidValueError(spec.name, "must be an integer"))
        if spec.allowed_values is not None and number not in spec.allowed_values:
            allowed = ", ".join(str(v) for v in sorted(spec.allowed_values))
            return Err(InvalidValueError(spec.name, f"must be one of {allowed}"))
        if spec.minimum is not None and number < spec.minimum:
            return Err(InvalidValueError(spec.name, f"must be >= {spec.minimum}"))
        if spec.maximum is not None and number > spec.maximum:
            return Err(InvalidValueError(spec.name, f"must be <= {spec.maximum}"))
        return Ok(number)

    if not isinstance(value, str):
        return Err(InvalidValueError(spec.name, "must be text"))
    if spec.non_empty and not value.strip():
        return Err(InvalidValueError(spec.name, "must not be empty"))
    return Ok(value)


def check_known_columns(
    values: ContentValues, schema: EntitySchema,
) -> InvalidValueError | None:
    """Reject unknown and system-assigned columns."""
    for name in values:
        spec = schema.column(name)
        if spec is None:
            return InvalidValueError(name, "unknown column")
        if spec.system_assigned:
            return InvalidValueError(name, "assigned by storage, cannot be written")
    return None


def validate_pet_values(
    values: ContentValues, is_create: bool, schema: EntitySchema = PET_SCHEMA,
) -> Result[dict[str, Any]]:
    """Validate a proposed field set. Ok(normalized values) or Err(ValidationError)."""
    error = check_known_columns(values, schema)
    if error:
        return Err(error)

    normalized: dict[str, Any] = {}
    for spec in schema.columns:
        if spec.name not in values:
            if is_create and spec.required_on_create:
                return Err(MissingFieldError(spec.name))
            continue
        checked = check_value(spec, values[spec.name])
        if checked.is_err():
            return checked
        normalized[spec.name] = checked.unwrap()
    return Ok(normalized)


def is_empty_update(values: ContentValues | None) -> bool:
    """An update carrying zero fields is a no-op (0 rows, no storage call)."""
    return not values
