from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com"
DEFAULT_HISTORY_LIMIT = 20
DEFAULT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


def _env_flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_float(name: str) -> float | None:
    raw = os.getenv(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


@dataclass(slots=True)
class Settings:
    """Runtime configuration assembled from the process environment."""

    api_key: str | None = None
    api_base: str = DEFAULT_API_BASE
    default_model: str = DEFAULT_MODEL
    request_timeout: float | None = None
    history_limit: int = DEFAULT_HISTORY_LIMIT
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))
    log_level: str = "INFO"
    log_json: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        origins_env = os.getenv("API_CORS_ORIGINS", "")
        origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
        if not origins:
            origins = list(DEFAULT_ORIGINS)

        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or None,
            api_base=os.getenv("GEMINI_API_BASE") or DEFAULT_API_BASE,
            default_model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
            request_timeout=_env_float("GEMINI_TIMEOUT"),
            history_limit=_env_int("EVENT_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
            cors_origins=origins,
            log_level=os.getenv("LOG_LEVEL") or "INFO",
            log_json=_env_flag("LOG_JSON"),
        )
