from __future__ import annotations

import asyncio
from typing import Any, AsyncIterator

from fastapi import APIRouter, Depends
from sse_starlette.sse import EventSourceResponse

from summary_hub.core.log import get_logger
from summary_hub.routes.deps import get_broadcaster
from summary_hub.workers.broadcaster import DEFAULT_SINK_SIZE, EventBroadcaster, QueueSink

router = APIRouter(prefix="/events", tags=["events"])
logger = get_logger(__name__)


async def event_stream(broadcaster: EventBroadcaster) -> AsyncIterator[dict[str, Any]]:
    """Yield SSE messages for one connection: history first, then live events.

    The subscription ends when the consumer stops iterating, whether the
    generator is closed or the surrounding task is cancelled on disconnect.
    """
    sink = QueueSink(maxsize=max(DEFAULT_SINK_SIZE, broadcaster.history_limit * 2))
    handle = await broadcaster.subscribe(sink)
    try:
        while True:
            event = await sink.get()
            if event is None:
                # dropped by the broadcaster after a failed delivery
                return
            yield {"id": event.id, "data": event.model_dump_json(by_alias=True, exclude_none=True)}
    finally:
        sink.close()
        await asyncio.shield(broadcaster.unsubscribe(handle))
        logger.debug("stream_closed", client_id=handle.client_id)


@router.get("")
async def stream_events(broadcaster: EventBroadcaster = Depends(get_broadcaster)) -> EventSourceResponse:
    """Open a server-sent event stream of result events."""
    return EventSourceResponse(event_stream(broadcaster))


@router.get("/history")
async def get_event_history(broadcaster: EventBroadcaster = Depends(get_broadcaster)) -> dict:
    items = [event.to_wire() for event in broadcaster.history()]
    return {"items": items, "limit": broadcaster.history_limit}
