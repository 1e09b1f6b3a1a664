from __future__ import annotations

import asyncio

import httpx

from summary_hub.domain import FilePayload, JobRequest, UrlTarget
from summary_hub.infrastructure.ai import AIServiceError, GenerationResult
from summary_hub.workers.broadcaster import EventBroadcaster, QueueSink
from summary_hub.workers.dispatch import JobDispatcher
from summary_hub.workers.executor import JobExecutor, extract_sources


def test_extract_sources_filters_and_deduplicates():
    chunks = [
        {"web": {"uri": "https://a.example", "title": "First title"}},
        {"web": {"uri": "https://a.example", "title": "Second title"}},
        {"web": {"title": "missing uri"}},
        {"web": {"uri": ""}},
        {"retrievedContext": {"uri": "https://ignored.example"}},
        {"web": {"uri": "https://b.example"}},
    ]

    sources = extract_sources(chunks)

    assert [(source.uri, source.title) for source in sources] == [
        ("https://a.example", "First title"),
        ("https://b.example", "https://b.example"),
    ]


def test_url_job_requests_grounded_summary(fake_ai):
    fake_ai.result = GenerationResult(
        text="Summary text",
        grounding_chunks=[
            {"web": {"uri": "https://a.example", "title": "A"}},
            {"web": {"uri": "https://a.example", "title": "A again"}},
        ],
    )
    executor = JobExecutor(fake_ai, default_model="gemini-2.5-flash")
    job = JobRequest(target=UrlTarget("https://example.com/post"), source_label="Default Webhook")

    outcome = asyncio.run(executor.execute(job))

    assert outcome.ok
    assert outcome.summary == "Summary text"
    assert len(outcome.sources) == 1
    assert outcome.sources[0].title == "A"
    request = fake_ai.requests[0]
    assert request.grounding is True
    assert request.model == "gemini-2.5-flash"
    assert "https://example.com/post" in request.prompt


def test_file_job_passes_binary_and_prompt(fake_ai):
    fake_ai.result = GenerationResult(
        text="It is an invoice.",
        grounding_chunks=[{"web": {"uri": "https://unused.example"}}],
    )
    executor = JobExecutor(fake_ai, default_model="gemini-2.5-flash")
    payload = FilePayload(data=b"%PDF-1.4", mime_type="application/pdf", file_name="invoice.pdf")
    job = JobRequest(target=payload, source_label="Manual File Analysis", prompt="What is this?", model="gemini-pro")

    outcome = asyncio.run(executor.execute(job))

    assert outcome.ok
    assert outcome.sources == []
    request = fake_ai.requests[0]
    assert request.attachment == payload
    assert request.prompt == "What is this?"
    assert request.grounding is False
    assert request.model == "gemini-pro"


def test_failures_are_normalised(fake_ai):
    executor = JobExecutor(fake_ai, default_model="m")
    job = JobRequest(target=UrlTarget("https://example.com"), source_label="x")

    fake_ai.error = AIServiceError("Quota exceeded")
    assert asyncio.run(executor.execute(job)).error == "Quota exceeded"

    fake_ai.error = httpx.ConnectError("connection refused")
    outcome = asyncio.run(executor.execute(job))
    assert not outcome.ok
    assert "connection refused" in outcome.error


def test_dispatcher_publishes_outcome_with_correlation_id(fake_ai):
    async def scenario():
        broadcaster = EventBroadcaster()
        dispatcher = JobDispatcher(JobExecutor(fake_ai, default_model="m"), broadcaster)
        sink = QueueSink()
        await broadcaster.subscribe(sink)
        task = dispatcher.submit(
            JobRequest(
                target=UrlTarget("https://example.com"),
                source_label="Reading list",
                correlation_id="tmp-1",
                webhook_id="wh_1",
            )
        )
        assert isinstance(task, asyncio.Task)
        await task
        await dispatcher.drain()
        return dispatcher.pending, sink.drain()

    pending, events = asyncio.run(scenario())
    assert pending == 0
    assert len(events) == 1
    event = events[0]
    assert event.status == "success"
    assert event.correlation_id == "tmp-1"
    assert event.webhook_id == "wh_1"
    assert event.input_descriptor == ("url", "https://example.com")
    assert event.to_wire()["inputType"] == "url"


def test_dispatcher_turns_crash_into_error_event(fake_ai, monkeypatch):
    async def explode(job):
        raise RuntimeError("executor bug")

    async def scenario():
        broadcaster = EventBroadcaster()
        executor = JobExecutor(fake_ai, default_model="m")
        monkeypatch.setattr(executor, "execute", explode)
        dispatcher = JobDispatcher(executor, broadcaster)
        payload = FilePayload(data=b"abc", mime_type="text/plain", file_name="notes.txt")
        dispatcher.submit(JobRequest(target=payload, source_label="Manual File Analysis", prompt="p"))
        await dispatcher.drain()
        return broadcaster.history()

    history = asyncio.run(scenario())
    assert len(history) == 1
    assert history[0].status == "error"
    assert history[0].summary == "Error: executor bug"
    assert history[0].file_name == "notes.txt"
    assert history[0].sources == ()


def test_event_ids_increase_in_creation_order(fake_ai):
    dispatcher = JobDispatcher(JobExecutor(fake_ai, default_model="m"), EventBroadcaster())
    ids = [dispatcher.next_event_id() for _ in range(3)]
    assert len(set(ids)) == 3
    assert [int(value.rsplit("-", 1)[1]) for value in ids] == [1, 2, 3]
