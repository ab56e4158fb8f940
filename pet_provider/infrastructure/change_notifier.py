"""Change Notifier — process-wide registry of observers keyed by content URI.

Invariants:
    - notify() never blocks on observers: deliveries run as background tasks
    - Observer exceptions are logged, never propagated to the mutating caller
    - Matching is segment-wise on (authority, *segments), never raw string prefix:
        * observers on the exact URI are notified
        * observers on an ancestor are notified when registered with
          notify_for_descendants=True (the default)
        * observers on a descendant are notified (a collection change may
          affect every item under it)
    - The scheme is ignored for matching ("content://a/pets" == "a/pets")
    - Registry mutations are guarded by a lock; notify() works on a snapshot

Design Decisions:
    - Plain callables or coroutine functions as observers: no base class to inherit
    - Pending delivery tasks are tracked so they are not garbage collected
      mid-flight and so wait_idle() can drain them (tests, shutdown)
    - get_change_notifier() cached (lru_cache) — single registry per process
"""

import asyncio
import inspect
import logging
import threading
from dataclasses import dataclass
from functools import lru_cache

from pet_provider.core.repository_protocols import ChangeObserver
from pet_provider.core.uri_matcher import ContentUri, parse_content_uri

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Registration:
    uri: ContentUri
    observer: ChangeObserver
    notify_for_descendants: bool


class ChangeNotifier:
    """Fan-out of 'data at this URI may have changed' signals."""

    def __init__(self):
        self._lock = threading.Lock()
        self._registrations: list[_Registration] = []
        self._pending: set[asyncio.Task] = set()

    def subscribe(
        self, uri: str, observer: ChangeObserver,
        notify_for_descendants: bool = True,
    ) -> None:
        """Register observer for changes at uri (and below it, by default)."""
        parsed = parse_content_uri(uri, "subscribe")
        with self._lock:
            self._registrations.append(
                _Registration(parsed, observer, notify_for_descendants),
            )
        logger.debug("Observer subscribed", extra={"uri": uri})

    def unsubscribe(self, observer: ChangeObserver) -> int:
        """Remove every registration of observer. Returns how many were removed."""
        with self._lock:
            before = len(self._registrations)
            self._registrations = [
                r for r in self._registrations if r.observer is not observer
            ]
            return before - len(self._registrations)

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._registrations)

    def observers_for(self, uri: str) -> list[ChangeObserver]:
        """Observers that must hear about a change at uri, in registration order."""
        target = parse_content_uri(uri, "notify")
        with self._lock:
            snapshot = list(self._registrations)
        matched: list[ChangeObserver] = []
        for reg in snapshot:
            hit = (
                reg.uri.node_path == target.node_path
                or (reg.notify_for_descendants and reg.uri.is_ancestor_of(target))
                or target.is_ancestor_of(reg.uri)
            )
            if hit and not any(o is reg.observer for o in matched):
                matched.append(reg.observer)
        return matched

    def notify(self, uri: str) -> int:
        """Schedule delivery to every matching observer. Returns the observer count."""
        observers = self.observers_for(uri)
        logger.debug(
            f"Notifying {len(observers)} observer(s)", extra={"uri": uri},
        )
        for observer in observers:
            self._dispatch(observer, uri)
        return len(observers)

    def _dispatch(self, observer: ChangeObserver, uri: str) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop (sync caller): deliver inline, still isolated.
            _deliver_blocking(observer, uri)
            return
        task = loop.create_task(_deliver(observer, uri))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def wait_idle(self) -> None:
        """Wait until every scheduled delivery has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


async def _deliver(observer: ChangeObserver, uri: str) -> None:
    try:
        result = observer(uri)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.error(
            f"Change observer failed: {e}", exc_info=True, extra={"uri": uri},
        )


def _deliver_blocking(observer: ChangeObserver, uri: str) -> None:
    try:
        result = observer(uri)
        if inspect.isawaitable(result):
            asyncio.run(result)
    except Exception as e:
        logger.error(
            f"Change observer failed: {e}", exc_info=True, extra={"uri": uri},
        )


@lru_cache
def get_change_notifier() -> ChangeNotifier:
    return ChangeNotifier()
