"""Infrastructure layer exports."""

from .ai import AIClient, AIServiceError, GenerationRequest, GenerationResult, UnconfiguredAIClient
from .gemini import GeminiClient
from .webhooks import InMemoryWebhookRepository, WebhookRepository

__all__ = [
    "AIClient",
    "AIServiceError",
    "GeminiClient",
    "GenerationRequest",
    "GenerationResult",
    "InMemoryWebhookRepository",
    "UnconfiguredAIClient",
    "WebhookRepository",
]
