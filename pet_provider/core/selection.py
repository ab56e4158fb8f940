"""Selection & Ordering — structured filter predicates and sort keys for storage calls.

Invariants:
    - A selection is a tuple of Predicate joined by AND; empty means "all rows"
    - Every predicate pairs a column with its argument (no positional '?' binding)
    - with_id_predicate() drops caller predicates on the primary key and appends
      the key taken from the URI — the URI always wins
    - Column names are checked against the entity schema before reaching storage

Design Decisions:
    - Structured predicates over raw SQL fragments: storage renders them with bound
      parameters, callers can never inject SQL (ADR: safe storage contract)
    - Pure functions returning Result: the provider decides when to raise
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pet_provider.core.errors import InvalidValueError
from pet_provider.core.pet_contract import EntitySchema, COLUMN_ID
from pet_provider.core.result import Err, Ok, Result

OPERATORS = frozenset({
    "=", "!=", "<", "<=", ">", ">=", "like", "in", "is_null", "is_not_null",
})
UNARY_OPERATORS = frozenset({"is_null", "is_not_null"})

_SORT_TERM = re.compile(r"^\s*(\w+)(?:\s+(asc|desc))?\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class Predicate:
    """column <op> value. value is ignored for unary operators."""
    column: str
    op: str = "="
    value: Any = None


@dataclass(frozen=True)
class SortKey:
    column: str
    descending: bool = False


Selection = tuple[Predicate, ...]
SortOrder = tuple[SortKey, ...]


def with_id_predicate(
    selection: Iterable[Predicate], key: int, id_column: str = COLUMN_ID,
) -> Selection:
    """Replace any caller predicate on the id column with `id_column = key`."""
    kept = tuple(p for p in selection if p.column != id_column)
    return (*kept, Predicate(id_column, "=", key))


def check_predicate(predicate: Predicate, schema: EntitySchema) -> InvalidValueError | None:
    """Return an error if the predicate names an unknown column or operator."""
    if not schema.has_column(predicate.column):
        return InvalidValueError(predicate.column, "unknown column")
    if predicate.op not in OPERATORS:
        return InvalidValueError(predicate.column, f"unsupported operator '{predicate.op}'")
    if predicate.op == "in" and not isinstance(
        predicate.value, (list, tuple, set, frozenset),
    ):
        return InvalidValueError(predicate.column, "'in' requires a list of values")
    return None


def validate_selection(
    selection: Iterable[Predicate] | None, schema: EntitySchema,
) -> Result[Selection]:
    """Check every predicate against the schema. First error wins."""
    predicates = tuple(selection or ())
    for predicate in predicates:
        error = check_predicate(predicate, schema)
        if error:
            return Err(error)
    return Ok(predicates)


def validate_projection(
    projection: Iterable[str] | None, schema: EntitySchema,
) -> Result[tuple[str, ...]]:
    """None means every column. Unknown columns are rejected."""
    if projection is None:
        return Ok(schema.column_names)
    columns = tuple(projection)
    for column in columns:
        if not schema.has_column(column):
            return Err(InvalidValueError(column, "unknown column"))
    return Ok(columns or schema.column_names)


def parse_sort_order(
    sort_order: str | None, schema: EntitySchema,
) -> Result[SortOrder]:
    """Parse 'name ASC, weight DESC' into sort keys."""
    if not sort_order or not sort_order.strip():
        return Ok(())
    keys = []
    for term in sort_order.split(","):
        matched = _SORT_TERM.match(term)
        if not matched:
            return Err(InvalidValueError("sort_order", f"cannot parse '{term.strip()}'"))
        column, direction = matched.group(1), matched.group(2)
        if not schema.has_column(column):
            return Err(InvalidValueError(column, "unknown column"))
        keys.append(SortKey(column, (direction or "").lower() == "desc"))
    return Ok(tuple(keys))
