from __future__ import annotations

import asyncio
import itertools
import time

from summary_hub.core.log import get_logger
from summary_hub.core.schema import ResultEvent
from summary_hub.domain import FilePayload, JobOutcome, JobRequest, UrlTarget
from summary_hub.workers.broadcaster import EventBroadcaster
from summary_hub.workers.executor import JobExecutor

logger = get_logger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class JobDispatcher:
    """Hands accepted jobs to the executor in the background and publishes the outcome."""

    def __init__(self, executor: JobExecutor, broadcaster: EventBroadcaster) -> None:
        self._executor = executor
        self._broadcaster = broadcaster
        self._counter = itertools.count(1)
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def next_event_id(self) -> str:
        return f"evt-{_now_ms()}-{next(self._counter):06d}"

    def build_event(self, job: JobRequest, outcome: JobOutcome) -> ResultEvent:
        target = job.target
        return ResultEvent(
            id=self.next_event_id(),
            correlation_id=job.correlation_id,
            webhook_id=job.webhook_id,
            source_label=job.source_label,
            status="success" if outcome.ok else "error",
            summary=outcome.summary if outcome.ok else f"Error: {outcome.error}",
            sources=tuple(outcome.sources) if outcome.ok else (),
            input_type="url" if isinstance(target, UrlTarget) else "file",
            url=target.url if isinstance(target, UrlTarget) else None,
            file_name=target.file_name if isinstance(target, FilePayload) else None,
            timestamp=_now_ms(),
        )

    def submit(self, job: JobRequest) -> asyncio.Task[None]:
        """Start ``job`` in the background; the caller never awaits it."""

        task = asyncio.create_task(self._run(job))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info(
            "job_accepted",
            kind=job.kind,
            source_label=job.source_label,
            correlation_id=job.correlation_id,
        )
        return task

    async def _run(self, job: JobRequest) -> None:
        try:
            outcome = await self._executor.execute(job)
            event = self.build_event(job, outcome)
        except Exception as exc:
            logger.exception("job_crashed", kind=job.kind, correlation_id=job.correlation_id)
            event = self.build_event(job, JobOutcome.failure(str(exc)))

        try:
            await self._broadcaster.publish(event)
        except Exception:
            logger.exception("publish_failed", event_id=event.id)
            return
        logger.info("job_completed", event_id=event.id, status=event.status, correlation_id=job.correlation_id)

    async def drain(self) -> None:
        """Wait until every job submitted so far has been published."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
