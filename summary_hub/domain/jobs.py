"""Domain entities for summarisation jobs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from summary_hub.core.schema import GroundingSource


@dataclass(slots=True, frozen=True)
class UrlTarget:
    url: str


@dataclass(slots=True, frozen=True)
class FilePayload:
    data: bytes
    mime_type: str
    file_name: str


JobTarget = Union[UrlTarget, FilePayload]


@dataclass(slots=True)
class JobRequest:
    """A single inbound trigger; lives only while its job is in flight."""

    target: JobTarget
    source_label: str
    correlation_id: str | None = None
    webhook_id: str | None = None
    model: str | None = None
    prompt: str | None = None

    @property
    def kind(self) -> str:
        return "url" if isinstance(self.target, UrlTarget) else "file"


@dataclass(slots=True)
class JobOutcome:
    """Normalised executor result: either a summary or an error message."""

    summary: str = ""
    sources: list[GroundingSource] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, message: str) -> "JobOutcome":
        return cls(error=message or "The model failed to generate a response.")


@dataclass(slots=True)
class WebhookConfig:
    """Named webhook registered by a user."""

    id: str
    name: str
    ai_model: str
