"""Merge streamed result events into a local, newest-first result list.

A client that submits a job first shows a ``loading`` placeholder keyed by a
correlation id it chose itself.  When the authoritative event arrives over
the stream it carries that correlation id back, and the placeholder is
resolved in place.  Events triggered elsewhere (another client, the browser
extension) carry no known key and are inserted as new entries.  Replayed
events that are already present resolve to their existing entry, so a
reconnect never duplicates rows.
"""
from __future__ import annotations

import time
from typing import Iterable

from summary_hub.core.schema import InputType, ResultEntry, ResultEvent


def resolution_key(event: ResultEvent) -> str:
    return event.correlation_id or event.id


def _find(entries: list[ResultEntry], key: str) -> int | None:
    for index, entry in enumerate(entries):
        if entry.id == key or entry.correlation_id == key:
            return index
    return None


def _newest_first(entries: list[ResultEntry]) -> list[ResultEntry]:
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)


def merge(event: ResultEvent, entries: Iterable[ResultEntry]) -> list[ResultEntry]:
    """Return a new list with ``event`` folded in."""

    merged = list(entries)
    index = _find(merged, resolution_key(event))
    if index is None:
        merged.insert(0, ResultEntry.from_event(event))
    else:
        merged[index] = merged[index].model_copy(
            update={
                "id": event.id,
                "status": event.status,
                "summary": event.summary,
                "sources": event.sources,
            }
        )
    return _newest_first(merged)


def placeholder(
    correlation_id: str,
    *,
    source_label: str,
    input_type: InputType,
    value: str,
    timestamp: int | None = None,
) -> ResultEntry:
    """Build the optimistic ``loading`` entry shown right after submission."""

    return ResultEntry(
        id=correlation_id,
        correlation_id=correlation_id,
        source_label=source_label,
        status="loading",
        input_type=input_type,
        url=value if input_type == "url" else None,
        file_name=value if input_type == "file" else None,
        timestamp=timestamp if timestamp is not None else int(time.time() * 1000),
    )


def remove(entry_id: str, entries: Iterable[ResultEntry]) -> list[ResultEntry]:
    # Local only: the server keeps the event in its history.
    return [entry for entry in entries if entry.id != entry_id]
