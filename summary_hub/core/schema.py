from __future__ import annotations

from typing import Any, Literal, NamedTuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

EventStatus = Literal["success", "error"]
EntryStatus = Literal["loading", "success", "error"]
InputType = Literal["url", "file"]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GroundingSource(_WireModel):
    model_config = ConfigDict(frozen=True)

    uri: str
    title: str


class InputDescriptor(NamedTuple):
    kind: InputType
    value: str


class ResultEvent(_WireModel):
    """Terminal outcome of a job as broadcast to every stream client."""

    model_config = ConfigDict(frozen=True)

    id: str
    correlation_id: str | None = None
    webhook_id: str | None = None
    source_label: str
    status: EventStatus
    summary: str = ""
    sources: tuple[GroundingSource, ...] = ()
    input_type: InputType
    url: str | None = None
    file_name: str | None = None
    timestamp: int

    @property
    def input_descriptor(self) -> InputDescriptor:
        if self.input_type == "url":
            return InputDescriptor("url", self.url or "")
        return InputDescriptor("file", self.file_name or "")


class ResultEntry(_WireModel):
    """Client-side view of a result, including optimistic placeholders."""

    model_config = ConfigDict(frozen=True)

    id: str
    correlation_id: str | None = None
    webhook_id: str | None = None
    source_label: str
    status: EntryStatus
    summary: str = ""
    sources: tuple[GroundingSource, ...] = ()
    input_type: InputType
    url: str | None = None
    file_name: str | None = None
    timestamp: int

    @classmethod
    def from_event(cls, event: ResultEvent) -> "ResultEntry":
        return cls.model_validate(event.model_dump())


class WebhookTriggerPayload(_WireModel):
    url: str | None = None
    source_label: str | None = None
    correlation_id: str | None = None


class FileAnalysisPayload(_WireModel):
    file_data: str | None = None
    mime_type: str | None = None
    file_name: str | None = None
    prompt: str | None = None
    source_label: str | None = None
    correlation_id: str | None = None


class WebhookConfigPayload(_WireModel):
    name: str = ""
    ai_model: str | None = None


class WebhookConfigModel(_WireModel):
    id: str
    name: str
    ai_model: str
    trigger_path: str = ""
