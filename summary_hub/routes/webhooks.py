from __future__ import annotations

from urllib.parse import urlparse

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse

from summary_hub.application import WebhookService
from summary_hub.core.schema import WebhookConfigModel, WebhookConfigPayload, WebhookTriggerPayload
from summary_hub.domain import JobRequest, UrlTarget, WebhookConfig
from summary_hub.routes.deps import get_dispatcher, get_webhook_service
from summary_hub.workers.dispatch import JobDispatcher

router = APIRouter(tags=["webhooks"])


def is_valid_url(value: str) -> bool:
    try:
        parsed = urlparse(value.strip())
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.hostname) and " " not in value.strip()


def _serialise_config(config: WebhookConfig) -> dict:
    model = WebhookConfigModel(
        id=config.id,
        name=config.name,
        ai_model=config.ai_model,
        trigger_path=f"/api/webhook/{config.id}",
    )
    return model.to_wire()


@router.post("/webhook/{webhook_id}", status_code=status.HTTP_202_ACCEPTED)
async def trigger_webhook(
    webhook_id: str,
    payload: WebhookTriggerPayload | None = None,
    dispatcher: JobDispatcher = Depends(get_dispatcher),
    webhooks: WebhookService = Depends(get_webhook_service),
) -> JSONResponse:
    """Accept a URL for summarisation; the result arrives on the event stream."""
    payload = payload or WebhookTriggerPayload()
    url = (payload.url or "").strip()
    if not url:
        raise HTTPException(status_code=400, detail="URL is required.")
    if not is_valid_url(url):
        raise HTTPException(status_code=400, detail="Invalid URL format provided.")

    job = JobRequest(
        target=UrlTarget(url=url),
        source_label=webhooks.resolve_label(webhook_id, payload.source_label),
        correlation_id=payload.correlation_id,
        webhook_id=webhook_id,
        model=webhooks.resolve_model(webhook_id),
    )
    dispatcher.submit(job)
    body = {"status": "accepted", "webhookId": webhook_id}
    if payload.correlation_id:
        body["correlationId"] = payload.correlation_id
    return JSONResponse(body, status_code=status.HTTP_202_ACCEPTED)


@router.get("/webhooks")
async def list_webhooks(webhooks: WebhookService = Depends(get_webhook_service)) -> dict:
    return {"items": [_serialise_config(config) for config in webhooks.list_webhooks()]}


@router.post("/webhooks", status_code=status.HTTP_201_CREATED)
async def create_webhook(
    payload: WebhookConfigPayload,
    webhooks: WebhookService = Depends(get_webhook_service),
) -> dict:
    try:
        config = webhooks.create(payload.name, payload.ai_model)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _serialise_config(config)


@router.delete("/webhooks/{webhook_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_webhook(webhook_id: str, webhooks: WebhookService = Depends(get_webhook_service)) -> Response:
    if not webhooks.delete(webhook_id):
        raise HTTPException(status_code=404, detail="webhook not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
