from __future__ import annotations

from typing import Any

from app.core.config import Settings, settings as default_settings


def cors_middleware_options(cfg: Settings | None = None) -> dict[str, Any]:
    """Keyword arguments for CORSMiddleware built from CORS_* settings."""
    cfg = cfg or default_settings
    origins = [origin.rstrip("/") for origin in cfg.cors_allowed_origins if origin.strip()]
    regex = (cfg.cors_allow_origin_regex or "").strip() or None
    # Browsers refuse credentialed responses to a wildcard origin.
    credentials = cfg.cors_allow_credentials and "*" not in origins
    return {
        "allow_origins": origins,
        "allow_origin_regex": regex,
        "allow_credentials": credentials,
        "allow_methods": ["GET", "POST", "DELETE", "OPTIONS"],
        "allow_headers": ["*"],
    }
