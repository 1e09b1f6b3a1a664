"""Integration with the Gemini ``generateContent`` HTTP API."""
from __future__ import annotations

import base64
from typing import Any
from urllib.parse import urlparse

import httpx

from .ai import AIServiceError, GenerationRequest, GenerationResult


class GeminiClient:
    """Async client for the Gemini REST API."""

    def __init__(
        self,
        api_key: str,
        *,
        api_base: str = "https://generativelanguage.googleapis.com",
        api_version: str = "v1beta",
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        parsed = urlparse(api_base)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("api_base must include scheme and host")

        self._api_key = api_key
        self._base_url = f"{parsed.scheme}://{parsed.netloc}/{api_version.strip('/')}"
        self._client = http_client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _endpoint(self, model: str) -> str:
        name = model if model.startswith("models/") else f"models/{model}"
        return f"{self._base_url}/{name}:generateContent"

    @staticmethod
    def _build_payload(request: GenerationRequest) -> dict[str, Any]:
        parts: list[dict[str, Any]] = []
        if request.attachment is not None:
            parts.append(
                {
                    "inline_data": {
                        "mime_type": request.attachment.mime_type,
                        "data": base64.b64encode(request.attachment.data).decode("ascii"),
                    }
                }
            )
        parts.append({"text": request.prompt})

        payload: dict[str, Any] = {"contents": [{"role": "user", "parts": parts}]}
        if request.grounding:
            payload["tools"] = [{"google_search": {}}]
        return payload

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            error = body.get("error") or {}
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return f"Gemini API request failed with status {response.status_code}"

    @staticmethod
    def _collect_text(candidate: dict[str, Any]) -> str:
        content = candidate.get("content") or {}
        pieces = [
            part["text"]
            for part in content.get("parts") or []
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        ]
        return "".join(pieces)

    # ------------------------------------------------------------------
    # public API
    # ------------------------------------------------------------------
    async def generate(self, request: GenerationRequest) -> GenerationResult:
        response = await self._client.post(
            self._endpoint(request.model),
            headers={"x-goog-api-key": self._api_key},
            json=self._build_payload(request),
        )
        if response.is_error:
            raise AIServiceError(self._error_message(response))

        body = response.json()
        candidates = body.get("candidates") or []
        if not candidates:
            feedback = body.get("promptFeedback") or {}
            reason = feedback.get("blockReason")
            if reason:
                raise AIServiceError(f"The model returned no candidates (blocked: {reason})")
            raise AIServiceError("The model returned no candidates")

        candidate = candidates[0]
        metadata = candidate.get("groundingMetadata") or {}
        chunks = [chunk for chunk in metadata.get("groundingChunks") or [] if isinstance(chunk, dict)]
        return GenerationResult(text=self._collect_text(candidate), grounding_chunks=chunks)

    async def aclose(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            await self._client.aclose()


__all__ = ["GeminiClient"]
