from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def llm_rate_limit():
    """Limit for routes that spend a completion call."""
    return limiter.limit(settings.rate_limit)
