"""Application service layer for webhook configuration."""
from __future__ import annotations

from summary_hub.domain import WebhookConfig
from summary_hub.infrastructure.webhooks import WebhookRepository


class WebhookService:
    """Read side used by the ingress handlers plus simple management calls."""

    def __init__(self, repository: WebhookRepository, *, default_model: str) -> None:
        self._repository = repository
        self._default_model = default_model

    @property
    def default_model(self) -> str:
        return self._default_model

    # ------------------------------------------------------------------
    # lookups
    # ------------------------------------------------------------------
    def list_webhooks(self) -> list[WebhookConfig]:
        return self._repository.list_webhooks()

    def resolve_label(self, webhook_id: str, override: str | None = None) -> str:
        if override and override.strip():
            return override.strip()
        config = self._repository.get(webhook_id)
        return config.name if config else webhook_id

    def resolve_model(self, webhook_id: str) -> str:
        config = self._repository.get(webhook_id)
        if config and config.ai_model:
            return config.ai_model
        return self._default_model

    # ------------------------------------------------------------------
    # management
    # ------------------------------------------------------------------
    def create(self, name: str, ai_model: str | None = None) -> WebhookConfig:
        cleaned = name.strip()
        if not cleaned:
            raise ValueError("Webhook name cannot be empty.")
        return self._repository.create(cleaned, (ai_model or "").strip() or self._default_model)

    def delete(self, webhook_id: str) -> bool:
        return self._repository.delete(webhook_id)
