from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from summary_hub.core.schema import GroundingSource, ResultEvent
from summary_hub.infrastructure.ai import GenerationRequest, GenerationResult


class FakeAIClient:
    """Records requests and answers with a canned result or error."""

    def __init__(
        self,
        result: GenerationResult | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.result = result or GenerationResult(text="A short summary.")
        self.error = error
        self.delay = delay
        self.requests: list[GenerationRequest] = []
        self.closed = False

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture()
def fake_ai() -> FakeAIClient:
    return FakeAIClient()


@pytest.fixture()
def make_event():
    counter = iter(range(1, 10_000))

    def factory(**overrides) -> ResultEvent:
        number = next(counter)
        fields = {
            "id": f"evt-{number:04d}",
            "source_label": "Default Webhook",
            "status": "success",
            "summary": f"summary {number}",
            "sources": (GroundingSource(uri=f"https://example.com/{number}", title=f"Page {number}"),),
            "input_type": "url",
            "url": f"https://example.com/{number}",
            "timestamp": int(time.time() * 1000) + number,
        }
        fields.update(overrides)
        return ResultEvent(**fields)

    return factory
