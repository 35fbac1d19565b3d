import json
import os
from dataclasses import dataclass, field
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient
from pydantic_ai.messages import ModelMessage, ModelRequest, ModelResponse, TextPart, UserPromptPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

TEST_PROVIDERS_JSON = json.dumps(
    [
        {
            "host": "gemini",
            "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
            "api_key_env": "GEMINI_API_KEY",
            "models": [{"id": "gemini-1.5-pro", "name": "Gemini 1.5 Pro"}],
        }
    ]
)
os.environ.setdefault("GEMINI_API_KEY", "test")

from codeassist.core.config import settings
from codeassist.core.context import build_context
from codeassist.core.providers import reset_provider_registry
from codeassist.main import create_app


@dataclass
class FakeUpstream:
    """Scriptable stand-in for the remote model."""

    reply: str = "Here is the fixed loop."
    error: Optional[Exception] = None
    prompts: list[str] = field(default_factory=list)
    histories: list[list[ModelMessage]] = field(default_factory=list)
    model_settings: list[Any] = field(default_factory=list)

    def respond(self, messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        self.histories.append(list(messages))
        self.model_settings.append(info.model_settings)
        latest = messages[-1]
        assert isinstance(latest, ModelRequest)
        prompt = next(
            part.content for part in latest.parts if isinstance(part, UserPromptPart)
        )
        self.prompts.append(str(prompt))
        if self.error is not None:
            raise self.error
        return ModelResponse(parts=[TextPart(content=self.reply)])

    def model(self, _model_id: str = "gemini-1.5-pro") -> FunctionModel:
        return FunctionModel(self.respond)


@pytest.fixture(autouse=True, scope="session")
def _configure_providers():
    previous = settings.PROVIDERS
    settings.PROVIDERS = TEST_PROVIDERS_JSON
    reset_provider_registry()
    try:
        yield
    finally:
        settings.PROVIDERS = previous
        reset_provider_registry()


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def context(upstream: FakeUpstream):
    return build_context(settings, model_factory=upstream.model)


@pytest.fixture
def client(context):
    with TestClient(create_app(context)) as test_client:
        yield test_client
