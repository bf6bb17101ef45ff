from __future__ import annotations

import asyncio
import logging
import time
from typing import Sequence

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
)

from app.ai.config import AIConfig
from app.ai.errors import MissingCredentialsError, UpstreamServiceError, UpstreamTimeoutError
from app.ai.types import ChatMessage

logger = logging.getLogger(__name__)


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


class OpenAICompatibleProvider:
    """Completion client for any OpenAI-compatible chat endpoint (Groq, OpenAI)."""

    def __init__(self, config: AIConfig, client: AsyncOpenAI | None = None):
        key = (config.api_key or "").strip()
        if not key or _looks_like_placeholder(key):
            raise MissingCredentialsError(
                f"{config.key_env} is missing or not set properly. Add it to your environment or .env file."
            )

        self._config = config
        # The SDK retries connection errors, 429 and 5xx with exponential backoff.
        self._client = client or AsyncOpenAI(
            api_key=key,
            base_url=config.base_url,
            timeout=config.timeout_s,
            max_retries=config.max_retries,
        )

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
    ) -> str:
        payload = [{"role": m.role, "content": m.content} for m in messages]
        create_kwargs = {
            "model": self._config.model,
            "messages": payload,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(**create_kwargs),
                timeout=self._config.timeout_s,
            )
        except (asyncio.TimeoutError, APITimeoutError) as exc:
            self._log_failure("timeout", started)
            raise UpstreamTimeoutError(
                f"The completion service did not answer within {self._config.timeout_s:g} seconds.",
                timeout_s=self._config.timeout_s,
            ) from exc
        except AuthenticationError as exc:
            self._log_failure("auth", started)
            raise MissingCredentialsError(
                f"{self._config.key_env} was rejected by the completion service."
            ) from exc
        except APIConnectionError as exc:
            self._log_failure("unreachable", started)
            raise UpstreamServiceError(
                "Could not connect to the completion service.", unreachable=True
            ) from exc
        except APIStatusError as exc:
            self._log_failure(f"status_{exc.status_code}", started)
            raise UpstreamServiceError(
                f"Completion service error: {exc.message}", status_code=exc.status_code
            ) from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content or not content.strip():
            self._log_failure("empty", started)
            raise UpstreamServiceError("Completion service returned an empty response.")

        logger.info(
            "completion_ok provider=%s model=%s prompt_chars=%s output_chars=%s latency_ms=%s",
            self._config.provider,
            self._config.model,
            sum(len(m.content) for m in messages),
            len(content),
            int((time.perf_counter() - started) * 1000),
        )
        return content

    def _log_failure(self, kind: str, started: float) -> None:
        logger.warning(
            "completion_failed provider=%s model=%s kind=%s latency_ms=%s",
            self._config.provider,
            self._config.model,
            kind,
            int((time.perf_counter() - started) * 1000),
        )
