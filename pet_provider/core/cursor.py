"""Cursor — immutable snapshot of query rows tagged with the URI they were read from.

Invariants:
    - notification_uri is always the URI the query was issued against
    - rows are read-only snapshots; a cursor never refreshes itself

Design Decisions:
    - Snapshot over live cursor: callers subscribe to notification_uri and re-query
      after a change (ADR: no shared mutable object owned by the engine)
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Cursor:
    notification_uri: str
    columns: tuple[str, ...]
    rows: tuple[dict[str, Any], ...]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.rows)

    @property
    def count(self) -> int:
        return len(self.rows)

    def first(self) -> dict[str, Any] | None:
        return self.rows[0] if self.rows else None

    def to_dict(self) -> dict:
        return {
            "notification_uri": self.notification_uri,
            "columns": list(self.columns),
            "rows": [dict(row) for row in self.rows],
            "count": self.count,
        }
