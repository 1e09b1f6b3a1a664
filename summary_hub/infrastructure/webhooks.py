"""Infrastructure layer for webhook configuration storage."""
from __future__ import annotations

import secrets
import string
import time
from typing import Protocol

from summary_hub.domain import WebhookConfig

DEFAULT_WEBHOOK = WebhookConfig(id="wh_default_123", name="Default Webhook", ai_model="gemini-2.5-flash")

_ID_ALPHABET = string.ascii_lowercase + string.digits


class WebhookRepository(Protocol):
    """Storage contract for webhook configuration."""

    def get(self, webhook_id: str) -> WebhookConfig | None: ...

    def list_webhooks(self) -> list[WebhookConfig]: ...

    def create(self, name: str, ai_model: str) -> WebhookConfig: ...

    def delete(self, webhook_id: str) -> bool: ...


class InMemoryWebhookRepository:
    """Process-local webhook registry, seeded with a default entry."""

    def __init__(self, seed: list[WebhookConfig] | None = None) -> None:
        self._webhooks: dict[str, WebhookConfig] = {
            config.id: WebhookConfig(id=config.id, name=config.name, ai_model=config.ai_model)
            for config in (seed if seed is not None else [DEFAULT_WEBHOOK])
        }

    @staticmethod
    def _new_id() -> str:
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
        return f"wh_{int(time.time() * 1000)}_{suffix}"

    def get(self, webhook_id: str) -> WebhookConfig | None:
        return self._webhooks.get(webhook_id)

    def list_webhooks(self) -> list[WebhookConfig]:
        return list(self._webhooks.values())

    def create(self, name: str, ai_model: str) -> WebhookConfig:
        webhook_id = self._new_id()
        while webhook_id in self._webhooks:
            webhook_id = self._new_id()
        config = WebhookConfig(id=webhook_id, name=name, ai_model=ai_model)
        self._webhooks[webhook_id] = config
        return config

    def delete(self, webhook_id: str) -> bool:
        return self._webhooks.pop(webhook_id, None) is not None
