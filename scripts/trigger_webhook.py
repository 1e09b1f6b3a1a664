#!/usr/bin/env python
from __future__ import annotations

import argparse
import sys
import uuid

import httpx


def main() -> None:
    parser = argparse.ArgumentParser(description="Trigger a webhook with a page URL, like the browser extension does")
    parser.add_argument("webhook_id", help="Webhook identifier, e.g. wh_default_123")
    parser.add_argument("url", help="Page URL to summarise")
    parser.add_argument("--base-url", default="http://localhost:8000", help="Service base URL")
    parser.add_argument("--label", default=None, help="Override the source label shown to viewers")
    parser.add_argument("--correlation-id", default=None, help="Correlation id echoed back on the result event")
    args = parser.parse_args()

    correlation_id = args.correlation_id or f"cli-{uuid.uuid4().hex[:12]}"
    body = {"url": args.url, "correlationId": correlation_id}
    if args.label:
        body["sourceLabel"] = args.label

    endpoint = f"{args.base_url.rstrip('/')}/api/webhook/{args.webhook_id}"
    try:
        response = httpx.post(endpoint, json=body, timeout=10.0)
    except httpx.HTTPError as exc:
        print(f"Failed to trigger webhook: {exc}", file=sys.stderr)
        sys.exit(1)

    if response.status_code != 202:
        try:
            message = response.json().get("message")
        except ValueError:
            message = response.text
        print(f"Webhook rejected ({response.status_code}): {message}", file=sys.stderr)
        sys.exit(1)

    print(f"Webhook {args.webhook_id} accepted, correlation id {correlation_id}")


if __name__ == "__main__":
    main()
