"""Boundary Protocols — contracts between the provider core and its collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Storage is reached only through StorageEngine; nothing else touches the table
    - Each StorageEngine call is atomic: fully committed or no effect
    - insert_row returns the engine-assigned key; key uniqueness is the engine's job

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO, the pure core never awaits
"""

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol

from pet_provider.core.selection import Predicate, SortKey

# Called with the URI that changed. May be a plain function or a coroutine function.
ChangeObserver = Callable[[str], Awaitable[None] | None]


class StorageEngine(Protocol):
    """Contract for relational row storage — implemented by infrastructure."""
    async def query_rows(
        self, table: str, projection: Sequence[str],
        selection: Sequence[Predicate], sort_order: Sequence[SortKey],
    ) -> list[dict[str, Any]]: ...

    async def insert_row(self, table: str, values: Mapping[str, Any]) -> int: ...

    async def update_rows(
        self, table: str, values: Mapping[str, Any],
        selection: Sequence[Predicate],
    ) -> int: ...

    async def delete_rows(
        self, table: str, selection: Sequence[Predicate],
    ) -> int: ...


class ChangeNotifierLike(Protocol):
    """Contract for change fan-out — implemented by infrastructure."""
    def subscribe(
        self, uri: str, observer: ChangeObserver,
        notify_for_descendants: bool = True,
    ) -> None: ...
    def unsubscribe(self, observer: ChangeObserver) -> None: ...
    def notify(self, uri: str) -> int: ...
