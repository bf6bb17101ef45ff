from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    ai_provider: str
    ai_model: str | None
    ai_base_url: str | None
    ai_timeout_s: float
    ai_max_retries: int
    groq_api_key: str | None
    openai_api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    max_upload_bytes: int
    max_resume_chars: int
    users_db_path: str


def load_settings() -> Settings:
    return Settings(
        api_key=_get_env("API_KEY"),
        ai_provider=(_get_env("AI_PROVIDER", "groq") or "groq").strip().lower(),
        ai_model=_get_env("AI_MODEL"),
        ai_base_url=_get_env("AI_BASE_URL"),
        ai_timeout_s=_get_env_float("AI_TIMEOUT_S", 60.0),
        ai_max_retries=_get_env_int("AI_MAX_RETRIES", 2),
        groq_api_key=_get_env("GROQ_API_KEY"),
        openai_api_key=_get_env("OPENAI_API_KEY"),
        rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
        max_resume_chars=_get_env_int("MAX_RESUME_CHARS", 12000),
        users_db_path=_get_env("USERS_DB_PATH", "data/users.db") or "data/users.db",
    )


settings = load_settings()

__all__ = ["Settings", "load_settings", "settings"]
