"""Change Stream — SSE feed of change notifications for a content URI.

Invariants:
    - Observer is registered before the response starts, removed when the stream ends
    - First event is always `subscribed`; every notification becomes one `change` event
    - Events carry only the changed URI: clients re-query to read new rows
    - `limit` closes the stream after that many change events

Design Decisions:
    - asyncio.Queue between notifier and generator: notify() never waits on a slow client
    - Same SSE framing and anti-buffering headers as every other stream in the API
"""

import asyncio
import json
import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from pet_provider.api.dependencies import get_notifier
from pet_provider.core.uri_matcher import parse_content_uri
from pet_provider.infrastructure.change_notifier import ChangeNotifier

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/resolver", tags=["resolver"])

# ADR: SSE headers prevent proxy/browser buffering of streamed events.
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


@router.get("/changes")
async def stream_changes(
    uri: str = Query(..., min_length=1),
    descendants: bool = Query(True),
    limit: int | None = Query(None, ge=1),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """SSE stream of change events for uri (and URIs below it)."""
    parse_content_uri(uri, "subscribe")
    queue: asyncio.Queue[str] = asyncio.Queue()

    def on_change(changed_uri: str) -> None:
        queue.put_nowait(changed_uri)

    notifier.subscribe(uri, on_change, notify_for_descendants=descendants)

    async def event_generator():
        sent = 0
        try:
            yield _sse_line({"type": "subscribed", "data": {"uri": uri}})
            while limit is None or sent < limit:
                changed = await queue.get()
                sent += 1
                yield _sse_line({"type": "change", "data": {"uri": changed}})
        except asyncio.CancelledError:
            logger.info("Client disconnected from change stream", extra={"uri": uri})
            return
        finally:
            notifier.unsubscribe(on_change)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


def _sse_line(event: dict) -> str:
    """Format event as SSE data line."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"
