from __future__ import annotations

from dataclasses import dataclass

from app.core.config import Settings, settings as default_settings

PROVIDER_DEFAULTS = {
    "groq": {"model": "llama-3.3-70b-versatile", "base_url": "https://api.groq.com/openai/v1", "key_env": "GROQ_API_KEY"},
    "openai": {"model": "gpt-4o-mini", "base_url": None, "key_env": "OPENAI_API_KEY"},
}


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str | None
    key_env: str
    base_url: str | None
    timeout_s: float
    max_retries: int


def load_ai_config(settings: Settings | None = None) -> AIConfig:
    cfg = settings or default_settings
    provider = cfg.ai_provider
    if provider not in PROVIDER_DEFAULTS:
        raise ValueError(f"Unsupported AI_PROVIDER='{provider}'")

    defaults = PROVIDER_DEFAULTS[provider]
    api_key = cfg.groq_api_key if provider == "groq" else cfg.openai_api_key
    return AIConfig(
        provider=provider,
        model=(cfg.ai_model or defaults["model"]).strip(),
        api_key=(api_key or "").strip() or None,
        key_env=defaults["key_env"],
        base_url=cfg.ai_base_url or defaults["base_url"],
        timeout_s=cfg.ai_timeout_s,
        max_retries=cfg.ai_max_retries,
    )
