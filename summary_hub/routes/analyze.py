from __future__ import annotations

import base64
import binascii

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from summary_hub.application import WebhookService
from summary_hub.core.schema import FileAnalysisPayload
from summary_hub.domain import FilePayload, JobRequest
from summary_hub.routes.deps import get_dispatcher, get_webhook_service
from summary_hub.workers.dispatch import JobDispatcher

router = APIRouter(tags=["analysis"])

MANUAL_SOURCE_LABEL = "Manual File Analysis"


def _decode_file_data(value: str) -> bytes:
    # accept data URLs as produced by FileReader.readAsDataURL
    if value.startswith("data:") and "," in value:
        value = value.split(",", 1)[1]
    return base64.b64decode(value, validate=True)


@router.post("/analyze-file", status_code=status.HTTP_202_ACCEPTED)
async def analyze_file(
    payload: FileAnalysisPayload | None = None,
    dispatcher: JobDispatcher = Depends(get_dispatcher),
    webhooks: WebhookService = Depends(get_webhook_service),
) -> JSONResponse:
    """Accept a base64 file plus instruction prompt for background analysis."""
    payload = payload or FileAnalysisPayload()
    required = {"fileData": payload.file_data, "mimeType": payload.mime_type, "prompt": payload.prompt}
    missing = [name for name, value in required.items() if not (value or "").strip()]
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required fields: {', '.join(missing)}")

    try:
        data = _decode_file_data(payload.file_data.strip())
    except (binascii.Error, ValueError) as exc:
        raise HTTPException(status_code=400, detail="fileData must be base64 encoded") from exc

    file_name = (payload.file_name or "").strip() or "upload"
    job = JobRequest(
        target=FilePayload(data=data, mime_type=payload.mime_type.strip(), file_name=file_name),
        source_label=(payload.source_label or "").strip() or MANUAL_SOURCE_LABEL,
        correlation_id=payload.correlation_id,
        model=webhooks.default_model,
        prompt=payload.prompt.strip(),
    )
    dispatcher.submit(job)
    body = {"status": "accepted", "fileName": file_name}
    if payload.correlation_id:
        body["correlationId"] = payload.correlation_id
    return JSONResponse(body, status_code=status.HTTP_202_ACCEPTED)
