import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from summary_hub.application import WebhookService
from summary_hub.core.log import configure_logging, get_logger
from summary_hub.core.settings import Settings
from summary_hub.infrastructure import AIClient, GeminiClient, InMemoryWebhookRepository, UnconfiguredAIClient
from summary_hub.routes import analyze, events, webhooks
from summary_hub.workers.broadcaster import EventBroadcaster
from summary_hub.workers.dispatch import JobDispatcher
from summary_hub.workers.executor import JobExecutor

SHUTDOWN_GRACE_SECONDS = 10.0

logger = get_logger(__name__)


def _build_ai_client(settings: Settings) -> AIClient:
    if not settings.api_key:
        logger.warning("ai_client_unconfigured", hint="set GEMINI_API_KEY to enable summaries")
        return UnconfiguredAIClient()
    return GeminiClient(settings.api_key, api_base=settings.api_base, timeout=settings.request_timeout)


def create_app(settings: Settings | None = None, ai_client: AIClient | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level, json_logs=settings.log_json)
    client = ai_client or _build_ai_client(settings)

    broadcaster = EventBroadcaster(history_limit=settings.history_limit)
    executor = JobExecutor(client, default_model=settings.default_model)
    dispatcher = JobDispatcher(executor, broadcaster)
    webhook_service = WebhookService(InMemoryWebhookRepository(), default_model=settings.default_model)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("service_started", model=settings.default_model, history_limit=settings.history_limit)
        yield
        if dispatcher.pending:
            logger.info("draining_jobs", pending=dispatcher.pending)
            with suppress(asyncio.TimeoutError):
                await asyncio.wait_for(dispatcher.drain(), timeout=SHUTDOWN_GRACE_SECONDS)
        await client.aclose()
        logger.info("service_stopped")

    app = FastAPI(title="Summary Hub API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.broadcaster = broadcaster
    app.state.dispatcher = dispatcher
    app.state.webhooks = webhook_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse({"message": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body") or "body"
        return JSONResponse({"message": f"Invalid request {field}: {first.get('msg', 'malformed input')}"}, status_code=400)

    app.include_router(webhooks.router, prefix="/api")
    app.include_router(analyze.router, prefix="/api")
    app.include_router(events.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "Summary Hub API",
                "docs": "/docs",
                "events": "/api/events",
            }
        )

    return app


app = create_app()
