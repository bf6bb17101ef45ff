from functools import lru_cache

from app.ai.config import AIConfig, load_ai_config
from app.ai.providers.openai_provider import OpenAICompatibleProvider
from app.ai.types import CompletionClient


@lru_cache(maxsize=4)
def _provider_for(config: AIConfig) -> OpenAICompatibleProvider:
    return OpenAICompatibleProvider(config)


def get_completion_client() -> CompletionClient:
    """FastAPI dependency. Raises MissingCredentialsError when no key is configured."""
    return _provider_for(load_ai_config())
