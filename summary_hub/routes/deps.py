from __future__ import annotations

from fastapi import Request

from summary_hub.application import WebhookService
from summary_hub.workers.broadcaster import EventBroadcaster
from summary_hub.workers.dispatch import JobDispatcher


def get_broadcaster(request: Request) -> EventBroadcaster:
    """Return the broadcaster created for this application instance."""
    return request.app.state.broadcaster


def get_dispatcher(request: Request) -> JobDispatcher:
    return request.app.state.dispatcher


def get_webhook_service(request: Request) -> WebhookService:
    return request.app.state.webhooks
