from __future__ import annotations

from dataclasses import dataclass, replace
from time import perf_counter
from typing import Callable, Iterable, Optional

from loguru import logger
from pydantic_ai import Agent
from pydantic_ai.exceptions import ModelHTTPError
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from codeassist.services.ai_provider import build_openai_chat_model
from codeassist.services.model_history import (
    TranscriptTurn,
    build_message_history,
    coerce_turns,
    trim_turns,
)

DEFAULT_MAX_INPUT_CHARS = 30000
FILE_UPLOAD_MARKER = "I'm uploading the following content for analysis"
FILE_TRUNCATION_NOTICE = (
    "\n\n[Note: This is a large file upload that has been truncated. "
    "I'll focus on analyzing the visible portion.]"
)
MESSAGE_TRUNCATION_NOTICE = "\n\n[Message truncated due to size limitations]"

RESOURCE_EXHAUSTED_REPLY = (
    "I'm sorry, but the request was too large for me to process. Please try sending a "
    "smaller portion of text or breaking your question into multiple smaller messages."
)
FAILURE_REPLY = (
    "I'm sorry, I encountered an error processing your request. Please try again or "
    "rephrase your question. If you're uploading a file, try with a smaller file or only "
    "the most relevant portion."
)

ModelFactory = Callable[[str], Model]


@dataclass(frozen=True)
class GenerationSettings:
    temperature: float = 0.2
    max_output_tokens: int = 8192


@dataclass(frozen=True)
class GatewayReply:
    text: str
    error: bool = False


def truncate_large_input(text: str, limit: int = DEFAULT_MAX_INPUT_CHARS) -> str:
    if len(text) <= limit:
        return text
    notice = FILE_TRUNCATION_NOTICE if FILE_UPLOAD_MARKER in text else MESSAGE_TRUNCATION_NOTICE
    return text[:limit] + notice


def is_resource_exhausted(exc: BaseException) -> bool:
    if isinstance(exc, BaseExceptionGroup):
        return any(is_resource_exhausted(inner) for inner in exc.exceptions)
    if isinstance(exc, ModelHTTPError) and exc.status_code == 429:
        return True
    if 'RESOURCE_EXHAUSTED' in str(exc):
        return True
    return exc.__cause__ is not None and is_resource_exhausted(exc.__cause__)


class ModelGateway:
    """Single conversational channel to the upstream model.

    The transcript is shared by every caller of the process and replayed as
    context on each call. It is capped at ``history_limit`` turns; the oldest
    exchanges are dropped first.
    """

    def __init__(
        self,
        *,
        model_id: str,
        instructions: str,
        settings: Optional[GenerationSettings] = None,
        model_factory: ModelFactory = build_openai_chat_model,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
        history_limit: Optional[int] = None,
    ) -> None:
        self._model_id = model_id
        self._model_factory = model_factory
        self._model: Optional[Model] = None
        self._settings = settings or GenerationSettings()
        self._max_input_chars = max_input_chars
        self._history_limit = history_limit
        self._history: list[TranscriptTurn] = []
        self._agent: Agent[None, str] = Agent(
            model=None,
            output_type=str,
            instructions=instructions,
            defer_model_check=True,
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def settings(self) -> GenerationSettings:
        return self._settings

    def update_settings(
        self,
        *,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> GenerationSettings:
        changes = {}
        if temperature is not None:
            changes['temperature'] = temperature
        if max_output_tokens is not None:
            changes['max_output_tokens'] = max_output_tokens
        if changes:
            self._settings = replace(self._settings, **changes)
            logger.info(
                'model_gateway.settings_updated',
                temperature=self._settings.temperature,
                max_output_tokens=self._settings.max_output_tokens,
            )
        return self._settings

    def get_history(self) -> list[TranscriptTurn]:
        return list(self._history)

    def load_history(self, turns: Iterable) -> None:
        self._history = trim_turns(coerce_turns(turns), self._history_limit)

    def reset(self) -> None:
        self._history = []

    def _get_model(self) -> Model:
        if self._model is None:
            self._model = self._model_factory(self._model_id)
        return self._model

    def _model_settings(self) -> ModelSettings:
        return ModelSettings(
            temperature=self._settings.temperature,
            max_tokens=self._settings.max_output_tokens,
        )

    async def send(self, text: str) -> GatewayReply:
        prompt = truncate_large_input(text, self._max_input_chars)
        if len(prompt) != len(text):
            logger.info('model_gateway.input_truncated', original_len=len(text), limit=self._max_input_chars)
        start_ts = perf_counter()
        logger.info(
            'model_gateway.request',
            model=self._model_id,
            prompt_len=len(prompt),
            history_turns=len(self._history),
        )
        try:
            result = await self._agent.run(
                prompt,
                model=self._get_model(),
                message_history=build_message_history(self._history) or None,
                model_settings=self._model_settings(),
            )
        except Exception as exc:  # noqa: BLE001
            exhausted = is_resource_exhausted(exc)
            logger.opt(exception=exc).warning(
                'model_gateway.failed',
                model=self._model_id,
                resource_exhausted=exhausted,
                error=str(exc),
            )
            return GatewayReply(RESOURCE_EXHAUSTED_REPLY if exhausted else FAILURE_REPLY, error=True)

        reply = str(result.output or '')
        self._history.append(TranscriptTurn(role='user', text=prompt))
        self._history.append(TranscriptTurn(role='model', text=reply))
        self._history = trim_turns(self._history, self._history_limit)
        logger.info(
            'model_gateway.done',
            model=self._model_id,
            output_len=len(reply),
            duration_ms=int((perf_counter() - start_ts) * 1000),
        )
        return GatewayReply(reply)

    async def send_message(self, text: str) -> str:
        return (await self.send(text)).text
