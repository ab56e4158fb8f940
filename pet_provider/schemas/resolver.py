"""Resolver Schemas — Pydantic request/response models for the content resolver API.

Invariants:
    - Schemas validate request SHAPE only (uri present, predicates well-formed)
    - `values` is passed through untouched: entity invariants are enforced by the
      validator in core/, never duplicated here
    - An absent key in `values` stays absent; a JSON null stays None

Design Decisions:
    - dict[str, Any] for values over a PetCreate model: partial updates need
      "absent" and "null" to stay distinct
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from pet_provider.core.domain_types import ResourceKind
from pet_provider.core.selection import Predicate

Operator = Literal[
    "=", "!=", "<", "<=", ">", ">=", "like", "in", "is_null", "is_not_null",
]


class PredicateIn(BaseModel):
    """One filter predicate: column <op> value."""
    column: str = Field(min_length=1)
    op: Operator = "="
    value: Any = None

    def to_predicate(self) -> Predicate:
        value = self.value
        if self.op == "in" and isinstance(value, list):
            value = tuple(value)
        return Predicate(self.column, self.op, value)


class QueryRequest(BaseModel):
    uri: str = Field(min_length=1)
    projection: list[str] | None = None
    selection: list[PredicateIn] = Field(default_factory=list)
    sort_order: str | None = None


class InsertRequest(BaseModel):
    uri: str = Field(min_length=1)
    values: dict[str, Any]


class UpdateRequest(BaseModel):
    uri: str = Field(min_length=1)
    values: dict[str, Any] = Field(default_factory=dict)
    selection: list[PredicateIn] = Field(default_factory=list)


class DeleteRequest(BaseModel):
    uri: str = Field(min_length=1)
    selection: list[PredicateIn] = Field(default_factory=list)


class CursorResponse(BaseModel):
    notification_uri: str
    columns: list[str]
    rows: list[dict[str, Any]]
    count: int


class InsertResponse(BaseModel):
    uri: str


class RowsAffectedResponse(BaseModel):
    uri: str
    rows_affected: int


class TypeResponse(BaseModel):
    uri: str
    kind: ResourceKind
    mime_type: str


def to_predicates(selection: list[PredicateIn]) -> list[Predicate]:
    return [p.to_predicate() for p in selection]
