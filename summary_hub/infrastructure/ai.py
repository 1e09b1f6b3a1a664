"""Contract for the external generative AI service.

The summarisation call itself lives outside this service.  This module only
defines the request/response shapes the job executor relies on, plus a
fallback client used when no provider is configured, so jobs still resolve
to an ``error`` event instead of failing at start-up.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from summary_hub.domain import FilePayload


class AIServiceError(RuntimeError):
    """Raised when the AI service rejects or fails a request."""


@dataclass(slots=True)
class GenerationRequest:
    model: str
    prompt: str
    grounding: bool = False
    attachment: FilePayload | None = None


@dataclass(slots=True)
class GenerationResult:
    text: str
    grounding_chunks: list[dict[str, Any]] = field(default_factory=list)


class AIClient(Protocol):
    """Contract for AI integrations."""

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        """Run a single generation request."""

    async def aclose(self) -> None:
        """Release any network resources."""


class UnconfiguredAIClient:
    """Fallback client used when no API key is configured."""

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        raise AIServiceError("AI service is not configured")

    async def aclose(self) -> None:  # pragma: no cover - trivial
        return None
