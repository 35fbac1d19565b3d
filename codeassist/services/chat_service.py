from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from codeassist.core.context import AppContext
from codeassist.models.chat_session import ChatSession
from codeassist.models.enums import ChatRole

DEFAULT_SESSION_TITLE = 'New Conversation'
TITLE_MAX_CHARS = 30
UNEXPECTED_FAILURE_REPLY = 'Sorry, I had trouble processing your request. Please try again.'


@dataclass(frozen=True)
class ChatOutcome:
    session_id: str
    response: str
    error: bool = False


def derive_session_title(message: str) -> str:
    if not message:
        return DEFAULT_SESSION_TITLE
    if len(message) > TITLE_MAX_CHARS:
        return message[:TITLE_MAX_CHARS] + '...'
    return message


def ensure_session(ctx: AppContext, session_id: str, message: str) -> ChatSession:
    record = ctx.sessions.touch_session(session_id)
    if record:
        return record
    return ctx.sessions.create_session(session_id, derive_session_title(message))


async def process_chat_message(
    ctx: AppContext,
    *,
    session_id: str,
    message: str,
    temperature: Optional[float] = None,
    max_length: Optional[int] = None,
) -> ChatOutcome:
    """Record the user turn, ask the model, record whatever comes back."""
    ensure_session(ctx, session_id, message)
    ctx.sessions.append_message(session_id, message, ChatRole.USER)
    if temperature is not None or max_length is not None:
        current = ctx.gateway.settings
        if (temperature, max_length) != (current.temperature, current.max_output_tokens):
            ctx.gateway.update_settings(temperature=temperature, max_output_tokens=max_length)

    logger.info('chat.request', session_id=session_id, message_len=len(message))
    try:
        reply = await ctx.gateway.send(message)
        text, failed = reply.text, reply.error
    except Exception:  # noqa: BLE001
        logger.exception('chat.gateway_crashed', session_id=session_id)
        text, failed = UNEXPECTED_FAILURE_REPLY, True

    ctx.sessions.append_message(session_id, text, ChatRole.ASSISTANT)
    if failed:
        logger.warning('chat.reply_substituted', session_id=session_id)
    return ChatOutcome(session_id=session_id, response=text, error=failed)
