import json

import pytest

from codeassist.core.config import DEFAULT_MODEL_ID, DEFAULT_PROVIDERS_JSON
from codeassist.core.providers import ProviderRegistry, parse_providers


def test_default_providers_json_parses():
    providers = parse_providers(DEFAULT_PROVIDERS_JSON)
    assert [provider.host for provider in providers] == ["gemini"]
    registry = ProviderRegistry(providers)
    assert registry.has_model(DEFAULT_MODEL_ID)
    assert registry.provider_for_model(DEFAULT_MODEL_ID).api_key_env == "GEMINI_API_KEY"


def test_resolve_model_id_falls_back_to_first_model():
    registry = ProviderRegistry(parse_providers(DEFAULT_PROVIDERS_JSON))
    assert registry.resolve_model_id("gemini-1.5-flash") == "gemini-1.5-flash"
    assert registry.resolve_model_id("unknown") == DEFAULT_MODEL_ID
    assert registry.resolve_model_id(None) == DEFAULT_MODEL_ID


def test_registry_rejects_duplicate_models():
    payload = json.dumps(
        [
            {
                "host": "gemini",
                "base_url": "https://example.test/v1",
                "api_key_env": "GEMINI_API_KEY",
                "models": [
                    {"id": "gemini-1.5-pro", "name": "A"},
                    {"id": "gemini-1.5-pro", "name": "B"},
                ],
            }
        ]
    )
    with pytest.raises(RuntimeError, match="Duplicate model id"):
        ProviderRegistry(parse_providers(payload))


def test_parse_providers_requires_json_array():
    with pytest.raises(RuntimeError, match="non-empty JSON array"):
        parse_providers(json.dumps({"host": "gemini"}))
