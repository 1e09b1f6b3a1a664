"""Domain layer definitions."""

from .jobs import FilePayload, JobOutcome, JobRequest, UrlTarget, WebhookConfig

__all__ = [
    "FilePayload",
    "JobOutcome",
    "JobRequest",
    "UrlTarget",
    "WebhookConfig",
]
