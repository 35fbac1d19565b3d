from __future__ import annotations

from loguru import logger
from pydantic_ai.models import cached_async_http_client
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider

from codeassist.core.env import require_env_value
from codeassist.core.providers import get_provider_registry


def build_openai_chat_model(model_id: str) -> OpenAIChatModel:
    """Chat model for ``model_id`` on whichever OpenAI-compatible host serves it.

    Gemini is reached through its ``/v1beta/openai/`` compatibility endpoint.
    Raises ``RuntimeError`` when the model is unknown or its api key is unset.
    """
    upstream = get_provider_registry().provider_for_model(model_id)
    api_key = require_env_value(upstream.api_key_env)
    provider = OpenAIProvider(
        base_url=upstream.base_url,
        api_key=api_key,
        http_client=cached_async_http_client(provider=upstream.host),
    )
    logger.debug('ai.provider.selected', provider=upstream.host, model=model_id)
    return OpenAIChatModel(model_id, provider=provider)
