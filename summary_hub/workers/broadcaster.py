"""Fan-out of result events to connected stream clients.

The broadcaster owns two pieces of shared state: the registry of connected
sinks and a bounded history of recent events.  ``subscribe``, ``publish``
and ``unsubscribe`` all run under one ``asyncio.Lock``, so a new subscriber
sees either the history snapshot taken before an event or the event itself
on its live feed, never both and never neither.

Usage::

    broadcaster = EventBroadcaster(history_limit=20)
    sink = QueueSink()
    handle = await broadcaster.subscribe(sink)   # history replayed into sink
    await broadcaster.publish(event)              # delivered to every sink
    await broadcaster.unsubscribe(handle)
"""
from __future__ import annotations

import asyncio
import itertools
from collections import deque
from dataclasses import dataclass
from typing import Protocol

from summary_hub.core.log import get_logger
from summary_hub.core.schema import ResultEvent

logger = get_logger(__name__)

DEFAULT_SINK_SIZE = 256


class SinkClosedError(RuntimeError):
    """Raised when sending to a sink whose transport is gone."""


class EventSink(Protocol):
    """Transport-agnostic output for one connected client."""

    async def send(self, event: ResultEvent) -> None: ...

    def close(self) -> None: ...


class QueueSink:
    """In-memory sink that buffers events for a single consumer.

    A consumer that falls ``maxsize`` events behind is treated as gone.
    """

    def __init__(self, maxsize: int = DEFAULT_SINK_SIZE) -> None:
        self._queue: asyncio.Queue[ResultEvent | None] = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, event: ResultEvent) -> None:
        if self._closed:
            raise SinkClosedError("sink is closed")
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            raise SinkClosedError("client is not reading its stream") from None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        while True:
            try:
                self._queue.put_nowait(None)
                return
            except asyncio.QueueFull:
                # a stalled reader loses its backlog
                self._queue.get_nowait()

    async def get(self) -> ResultEvent | None:
        """Return the next event, or ``None`` once the sink is closed and drained."""

        return await self._queue.get()

    def drain(self) -> list[ResultEvent]:
        """Return every event buffered so far without waiting."""

        events: list[ResultEvent] = []
        while True:
            try:
                item = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return events
            if item is None:
                # keep the close marker for a later ``get``
                self._queue.put_nowait(None)
                return events
            events.append(item)


@dataclass(frozen=True, slots=True)
class ClientHandle:
    client_id: int


class EventBroadcaster:
    def __init__(self, history_limit: int = 20) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be positive")
        self._lock = asyncio.Lock()
        self._history: deque[ResultEvent] = deque(maxlen=history_limit)
        self._clients: dict[int, EventSink] = {}
        self._ids = itertools.count(1)

    @property
    def history_limit(self) -> int:
        return self._history.maxlen or 0

    @property
    def client_count(self) -> int:
        return len(self._clients)

    def history(self) -> list[ResultEvent]:
        return list(self._history)

    async def _deliver(self, client_id: int, sink: EventSink, events: list[ResultEvent]) -> bool:
        try:
            for event in events:
                await sink.send(event)
        except Exception as exc:
            logger.info("client_dropped", client_id=client_id, error=str(exc) or type(exc).__name__)
            self._clients.pop(client_id, None)
            try:
                sink.close()
            except Exception:  # pragma: no cover - transport already gone
                logger.debug("client_close_failed", client_id=client_id)
            return False
        return True

    async def subscribe(self, sink: EventSink) -> ClientHandle:
        async with self._lock:
            client_id = next(self._ids)
            self._clients[client_id] = sink
            logger.info("client_subscribed", client_id=client_id, replay=len(self._history))
            await self._deliver(client_id, sink, list(self._history))
            return ClientHandle(client_id)

    async def publish(self, event: ResultEvent) -> None:
        async with self._lock:
            self._history.append(event)
            for client_id, sink in list(self._clients.items()):
                await self._deliver(client_id, sink, [event])
            logger.debug("event_published", event_id=event.id, clients=len(self._clients))

    async def unsubscribe(self, handle: ClientHandle) -> None:
        async with self._lock:
            if self._clients.pop(handle.client_id, None) is not None:
                logger.info("client_unsubscribed", client_id=handle.client_id)
