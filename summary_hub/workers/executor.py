from __future__ import annotations

from typing import Any, Iterable

from summary_hub.core.log import get_logger
from summary_hub.core.schema import GroundingSource
from summary_hub.domain import FilePayload, JobOutcome, JobRequest, UrlTarget
from summary_hub.infrastructure.ai import AIClient, GenerationRequest

logger = get_logger(__name__)

URL_PROMPT = "Please provide a concise summary of the content found at this URL: {url}"


def extract_sources(chunks: Iterable[Any]) -> list[GroundingSource]:
    """Turn raw grounding chunks into unique ``{uri, title}`` citations.

    Chunks without a web URI are skipped.  The first occurrence of a URI wins,
    including its title, and the original order is kept.
    """

    sources: list[GroundingSource] = []
    seen: set[str] = set()
    for chunk in chunks:
        if not isinstance(chunk, dict):
            continue
        web = chunk.get("web")
        if not isinstance(web, dict):
            continue
        uri = web.get("uri")
        if not isinstance(uri, str) or not uri.strip():
            continue
        if uri in seen:
            continue
        seen.add(uri)
        title = web.get("title")
        sources.append(GroundingSource(uri=uri, title=title if isinstance(title, str) and title else uri))
    return sources


class JobExecutor:
    """Runs one job against the AI service; holds no per-job state."""

    def __init__(self, ai_client: AIClient, *, default_model: str) -> None:
        self._client = ai_client
        self._default_model = default_model

    def _build_request(self, job: JobRequest) -> GenerationRequest:
        model = job.model or self._default_model
        target = job.target
        if isinstance(target, UrlTarget):
            return GenerationRequest(model=model, prompt=URL_PROMPT.format(url=target.url), grounding=True)
        if isinstance(target, FilePayload):
            return GenerationRequest(model=model, prompt=job.prompt or "", attachment=target)
        raise TypeError(f"unsupported job target: {type(target).__name__}")

    async def execute(self, job: JobRequest) -> JobOutcome:
        try:
            request = self._build_request(job)
            result = await self._client.generate(request)
        except Exception as exc:
            logger.warning("job_execution_failed", kind=job.kind, source_label=job.source_label, error=str(exc))
            return JobOutcome.failure(str(exc))

        if job.kind == "file":
            return JobOutcome(summary=result.text)
        return JobOutcome(summary=result.text, sources=extract_sources(result.grounding_chunks))
