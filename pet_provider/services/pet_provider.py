"""Pet Provider — the only read/write surface over the pets table.

Invariants:
    - Every call is routed first: an unrecognized URI raises UnsupportedResourceError
      before validation or storage
    - Writes are validated before storage; a validation error never touches a row
    - Item URIs turn their key into `_id = key`, replacing any caller predicate on _id
    - insert is legal on the collection URI only; returns collection URI + "/<key>"
    - update with zero fields returns 0 without a storage call and without notifying,
      whatever the selection holds (only the URI is checked)
    - An item key above the key column's maximum addresses no row: empty cursor or
      0 rows, no storage call, no notification
    - update notifies only when at least one row changed
    - delete on the collection URI ALWAYS notifies (even 0 rows); delete on an item
      URI notifies only when a row was removed
    - Notification happens after the storage call returned (session closed)
    - Stateless between calls: no transaction spans two public operations

Design Decisions:
    - Routing table injected (UriMatcher) instead of a module-level matcher
    - Validation results unwrapped here: core returns Result, the shell raises
    - Collection-wide delete notifies even when nothing matched; item delete
      does not. The two paths stay separate (see DESIGN.md open questions)
    - Cursor carries notification_uri: callers subscribe there and re-query
"""

import logging
from collections.abc import Iterable

from pet_provider.core.cursor import Cursor
from pet_provider.core.domain_types import ContentValues, ResourceKind
from pet_provider.core.errors import UnsupportedResourceError
from pet_provider.core.pet_contract import (
    PET_SCHEMA, EntitySchema, content_item_type, content_list_type,
)
from pet_provider.core.repository_protocols import (
    ChangeNotifierLike, StorageEngine,
)
from pet_provider.core.selection import (
    Predicate, Selection, parse_sort_order, validate_projection,
    validate_selection, with_id_predicate,
)
from pet_provider.core.uri_matcher import RouteMatch, UriMatcher, build_pet_matcher
from pet_provider.core.validate_pet import is_empty_update, validate_pet_values

logger = logging.getLogger(__name__)


class PetProvider:
    """Routes content URIs to storage calls and fans out change notifications."""

    def __init__(
        self,
        storage: StorageEngine,
        notifier: ChangeNotifierLike,
        matcher: UriMatcher | None = None,
        schema: EntitySchema = PET_SCHEMA,
        authority: str | None = None,
    ):
        self._storage = storage
        self._notifier = notifier
        self._matcher = matcher or (
            build_pet_matcher(authority) if authority else build_pet_matcher()
        )
        self._schema = schema

    @property
    def matcher(self) -> UriMatcher:
        return self._matcher

    # ─── Routing ─────────────────────────────────────────────────

    def _selection_for(
        self, route: RouteMatch, selection: Iterable[Predicate] | None,
    ) -> Selection:
        checked = validate_selection(selection, self._schema).unwrap()
        if route.is_item:
            return with_id_predicate(checked, route.key, self._schema.primary_key)
        return checked

    def _key_in_range(self, route: RouteMatch) -> bool:
        """False for item keys no stored row can have (beyond the key column's maximum)."""
        if route.key is None:
            return True
        limit = self._schema.column(self._schema.primary_key).maximum
        return limit is None or route.key <= limit

    def resource_kind(self, uri: str) -> ResourceKind:
        """COLLECTION or ITEM. Raises UnsupportedResourceError otherwise."""
        return self._matcher.classify(uri, "type").kind

    def get_type(self, uri: str) -> str:
        """MIME type for uri, derived from the authority only."""
        route = self._matcher.classify(uri, "type")
        if route.is_item:
            return content_item_type(route.uri.authority)
        return content_list_type(route.uri.authority)

    # ─── Reads ───────────────────────────────────────────────────

    async def query(
        self,
        uri: str,
        projection: Iterable[str] | None = None,
        selection: Iterable[Predicate] | None = None,
        sort_order: str | None = None,
    ) -> Cursor:
        """Rows at uri. Item URIs are narrowed to their key."""
        route = self._matcher.classify(uri, "query")
        columns = validate_projection(projection, self._schema).unwrap()
        predicates = self._selection_for(route, selection)
        order = parse_sort_order(sort_order, self._schema).unwrap()
        if not self._key_in_range(route):
            return Cursor(notification_uri=uri, columns=columns, rows=())

        rows = await self._storage.query_rows(
            self._schema.table_name, columns, predicates, order,
        )
        logger.debug(
            f"Query returned {len(rows)} row(s)",
            extra={"uri": uri, "match_code": route.code},
        )
        return Cursor(notification_uri=uri, columns=columns, rows=tuple(rows))

    # ─── Writes ──────────────────────────────────────────────────

    async def insert(self, uri: str, values: ContentValues) -> str:
        """Insert one row into the collection. Returns the new item URI."""
        route = self._matcher.classify(uri, "insert")
        if route.kind != ResourceKind.COLLECTION:
            raise UnsupportedResourceError(uri, "insert")
        checked = validate_pet_values(values or {}, is_create=True, schema=self._schema)
        row = checked.unwrap()

        key = await self._storage.insert_row(self._schema.table_name, row)

        new_uri = str(route.uri.with_appended_id(key))
        logger.info(
            "Inserted row",
            extra={"uri": new_uri, "match_code": route.code, "operation": "insert"},
        )
        self._notifier.notify(uri)
        return new_uri

    async def update(
        self,
        uri: str,
        values: ContentValues,
        selection: Iterable[Predicate] | None = None,
    ) -> int:
        """Apply a partial field set to matching rows. Returns rows affected."""
        route = self._matcher.classify(uri, "update")
        if is_empty_update(values):
            return 0
        predicates = self._selection_for(route, selection)
        row = validate_pet_values(values, is_create=False, schema=self._schema).unwrap()
        if not self._key_in_range(route):
            return 0

        rows_updated = await self._storage.update_rows(
            self._schema.table_name, row, predicates,
        )
        logger.info(
            f"Updated {rows_updated} row(s)",
            extra={
                "uri": uri, "match_code": route.code,
                "operation": "update", "rows_affected": rows_updated,
            },
        )
        if rows_updated != 0:
            self._notifier.notify(uri)
        return rows_updated

    async def delete(
        self, uri: str, selection: Iterable[Predicate] | None = None,
    ) -> int:
        """Delete matching rows. Returns rows affected."""
        route = self._matcher.classify(uri, "delete")
        predicates = self._selection_for(route, selection)
        if not self._key_in_range(route):
            return 0

        rows_deleted = await self._storage.delete_rows(
            self._schema.table_name, predicates,
        )
        logger.info(
            f"Deleted {rows_deleted} row(s)",
            extra={
                "uri": uri, "match_code": route.code,
                "operation": "delete", "rows_affected": rows_deleted,
            },
        )
        if route.kind == ResourceKind.COLLECTION or rows_deleted != 0:
            self._notifier.notify(uri)
        return rows_deleted
