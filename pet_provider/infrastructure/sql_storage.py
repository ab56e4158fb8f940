"""SQL Storage Engine — implements the StorageEngine contract with SQLAlchemy Core.

Invariants:
    - One session (one transaction) per call: no transaction spans two calls
    - Writes commit before returning; failures roll back and raise StorageFailureError
    - Predicates rendered as bound parameters — values never interpolated into SQL
    - insert_row returns the engine-assigned primary key or raises

Design Decisions:
    - Core statements over ORM instances: the contract is table + columns + predicates
    - Table lookup through Base.metadata: any table registered there is addressable
    - The session is closed before the call returns, so change notification
      (done by the caller afterwards) never runs while a write lock is held
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import MetaData, Table, delete, insert, select, update
from sqlalchemy.sql.elements import ColumnElement

from pet_provider.core.errors import StorageFailureError
from pet_provider.core.selection import Predicate, SortKey
from pet_provider.db.base import Base
from pet_provider.infrastructure.database import DatabaseSessionManager
from pet_provider.models import pets_table  # noqa: F401

logger = logging.getLogger(__name__)


def _to_clause(table: Table, predicate: Predicate) -> ColumnElement:
    column = table.c[predicate.column]
    match predicate.op:
        case "=":
            return column == predicate.value
        case "!=":
            return column != predicate.value
        case "<":
            return column < predicate.value
        case "<=":
            return column <= predicate.value
        case ">":
            return column > predicate.value
        case ">=":
            return column >= predicate.value
        case "like":
            return column.like(predicate.value)
        case "in":
            return column.in_(list(predicate.value))
        case "is_null":
            return column.is_(None)
        case "is_not_null":
            return column.is_not(None)
    raise StorageFailureError(f"Unsupported operator '{predicate.op}'", "render")


def _where(table: Table, selection: Sequence[Predicate]) -> list[ColumnElement]:
    return [_to_clause(table, p) for p in selection]


class SqlStorageEngine:
    """Relational row storage over an async SQLAlchemy engine."""

    def __init__(
        self, db: DatabaseSessionManager, metadata: MetaData = Base.metadata,
    ):
        self._db = db
        self._metadata = metadata

    def _table(self, name: str) -> Table:
        table = self._metadata.tables.get(name)
        if table is None:
            raise StorageFailureError(f"Unknown table '{name}'", "lookup")
        return table

    async def query_rows(
        self, table: str, projection: Sequence[str],
        selection: Sequence[Predicate], sort_order: Sequence[SortKey],
    ) -> list[dict[str, Any]]:
        t = self._table(table)
        stmt = select(*(t.c[name] for name in projection))
        clauses = _where(t, selection)
        if clauses:
            stmt = stmt.where(*clauses)
        for key in sort_order:
            column = t.c[key.column]
            stmt = stmt.order_by(column.desc() if key.descending else column.asc())
        async with self._db.session("query") as db:
            result = await db.execute(stmt)
            rows = [dict(row) for row in result.mappings().all()]
        logger.debug(f"Queried {len(rows)} row(s) from {table}")
        return rows

    async def insert_row(self, table: str, values: Mapping[str, Any]) -> int:
        t = self._table(table)
        async with self._db.session("insert") as db:
            result = await db.execute(insert(t).values(**values))
            key = result.inserted_primary_key[0] if result.inserted_primary_key else None
            if key is None:
                await db.rollback()
                raise StorageFailureError("Engine did not assign a key", "insert")
            await db.commit()
        return int(key)

    async def update_rows(
        self, table: str, values: Mapping[str, Any],
        selection: Sequence[Predicate],
    ) -> int:
        t = self._table(table)
        stmt = update(t).values(**values)
        clauses = _where(t, selection)
        if clauses:
            stmt = stmt.where(*clauses)
        async with self._db.session("update") as db:
            result = await db.execute(stmt)
            count = result.rowcount
            await db.commit()
        return count

    async def delete_rows(
        self, table: str, selection: Sequence[Predicate],
    ) -> int:
        t = self._table(table)
        stmt = delete(t)
        clauses = _where(t, selection)
        if clauses:
            stmt = stmt.where(*clauses)
        async with self._db.session("delete") as db:
            result = await db.execute(stmt)
            count = result.rowcount
            await db.commit()
        return count
