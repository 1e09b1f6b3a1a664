#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Iterable, Iterator

import httpx
from pydantic import ValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from summary_hub.core.reconcile import merge
from summary_hub.core.schema import ResultEntry, ResultEvent


def iter_sse_data(lines: Iterable[str]) -> Iterator[str]:
    """Yield the ``data`` payload of each server-sent event."""

    buffer: list[str] = []
    for line in lines:
        if not line:
            if buffer:
                yield "\n".join(buffer)
                buffer = []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if field == "data":
            buffer.append(value[1:] if value.startswith(" ") else value)
    if buffer:
        yield "\n".join(buffer)


def render(entries: list[ResultEntry]) -> str:
    rows = []
    for entry in entries:
        target = entry.url or entry.file_name or ""
        summary = " ".join(entry.summary.split())
        if len(summary) > 80:
            summary = summary[:77] + "..."
        rows.append(f"[{entry.status:<7}] {entry.source_label}: {target}\n          {summary}")
    return "\n".join(rows)


def main() -> None:
    parser = argparse.ArgumentParser(description="Follow the result event stream and print the merged result list")
    parser.add_argument("--base-url", default="http://localhost:8000", help="Service base URL")
    parser.add_argument("--limit", type=int, default=10, help="Number of entries to display")
    args = parser.parse_args()

    entries: list[ResultEntry] = []
    endpoint = f"{args.base_url.rstrip('/')}/api/events"
    try:
        with httpx.stream("GET", endpoint, timeout=None) as response:
            response.raise_for_status()
            for data in iter_sse_data(response.iter_lines()):
                try:
                    event = ResultEvent.model_validate(json.loads(data))
                except (ValueError, ValidationError) as exc:
                    print(f"Skipping malformed event: {exc}", file=sys.stderr)
                    continue
                entries = merge(event, entries)
                print(render(entries[: args.limit]))
                print("-" * 40)
    except KeyboardInterrupt:
        pass
    except httpx.HTTPError as exc:
        print(f"Event stream failed: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
