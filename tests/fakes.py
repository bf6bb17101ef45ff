from __future__ import annotations

from typing import Sequence

from app.ai.types import ChatMessage


class FakeCompletionClient:
    """Returns canned completions in order (repeating the last) or raises ``error``."""

    def __init__(self, *responses: str, error: Exception | None = None):
        self.responses = list(responses)
        self.error = error
        self.calls: list[dict] = []

    async def complete(
        self,
        messages: Sequence[ChatMessage],
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
    ) -> str:
        self.calls.append(
            {
                "messages": list(messages),
                "temperature": temperature,
                "max_tokens": max_tokens,
                "json_mode": json_mode,
            }
        )
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0] if self.responses else ""
