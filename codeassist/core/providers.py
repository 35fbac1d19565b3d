from __future__ import annotations

import json
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from codeassist.core.config import settings


class UpstreamModel(BaseModel):
    model_config = ConfigDict(extra='forbid')

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class UpstreamProvider(BaseModel):
    """An OpenAI-compatible endpoint and the model ids it serves."""

    model_config = ConfigDict(extra='forbid')

    host: str = Field(..., min_length=1)
    base_url: str = Field(..., min_length=1)
    api_key_env: str = Field(..., min_length=1)
    models: list[UpstreamModel] = Field(..., min_length=1)


_PROVIDER_LIST = TypeAdapter(list[UpstreamProvider])


def parse_providers(raw: str) -> list[UpstreamProvider]:
    if not raw or not raw.strip():
        raise RuntimeError("PROVIDERS is missing in environment or .env")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RuntimeError("PROVIDERS must be valid JSON") from exc
    if not isinstance(payload, list) or not payload:
        raise RuntimeError("PROVIDERS must be a non-empty JSON array")
    try:
        return _PROVIDER_LIST.validate_python(payload)
    except ValidationError as exc:
        raise RuntimeError(f"PROVIDERS validation error: {exc}") from exc


class ProviderRegistry:
    def __init__(self, providers: list[UpstreamProvider]) -> None:
        if not providers:
            raise RuntimeError("PROVIDERS must include at least one provider")
        hosts = [provider.host.strip() for provider in providers]
        duplicates = sorted({host for host in hosts if hosts.count(host) > 1})
        if duplicates:
            raise RuntimeError(f"Duplicate provider host: {', '.join(duplicates)}")
        self._by_model: dict[str, UpstreamProvider] = {}
        for provider in providers:
            for model in provider.models:
                model_id = model.id.strip()
                if model_id in self._by_model:
                    raise RuntimeError(f"Duplicate model id: {model_id}")
                self._by_model[model_id] = provider

    def model_ids(self) -> list[str]:
        return list(self._by_model)

    def has_model(self, model_id: str) -> bool:
        return model_id in self._by_model

    def provider_for_model(self, model_id: str) -> UpstreamProvider:
        try:
            return self._by_model[model_id]
        except KeyError:
            raise RuntimeError(f"Model not available: {model_id}") from None

    def resolve_model_id(self, preferred: str | None) -> str:
        """``preferred`` when it is served, otherwise the first configured model."""
        if preferred and self.has_model(preferred):
            return preferred
        return self.model_ids()[0]


@lru_cache
def get_provider_registry() -> ProviderRegistry:
    return ProviderRegistry(parse_providers(settings.PROVIDERS))


def reset_provider_registry() -> None:
    get_provider_registry.cache_clear()
