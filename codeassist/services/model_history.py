from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Sequence

from pydantic_ai import messages as ai_messages

TurnRole = Literal['user', 'model']


@dataclass(frozen=True)
class TranscriptTurn:
    role: TurnRole
    text: str


def coerce_turns(items: Iterable) -> list[TranscriptTurn]:
    """Accept turns or ``{'role', 'text'}`` dicts; other roles are dropped."""
    turns: list[TranscriptTurn] = []
    for item in items:
        if isinstance(item, TranscriptTurn):
            turns.append(item)
            continue
        role = item.get('role')
        if role in ('user', 'model'):
            turns.append(TranscriptTurn(role=role, text=str(item.get('text', ''))))
    return turns


def build_message_history(turns: Sequence[TranscriptTurn]) -> list[ai_messages.ModelMessage]:
    messages: list[ai_messages.ModelMessage] = []
    for turn in turns:
        if turn.role == 'user':
            messages.append(
                ai_messages.ModelRequest(parts=[ai_messages.UserPromptPart(content=turn.text)])
            )
        else:
            messages.append(ai_messages.ModelResponse(parts=[ai_messages.TextPart(content=turn.text)]))
    return messages


def trim_turns(turns: list[TranscriptTurn], limit: int | None) -> list[TranscriptTurn]:
    if not limit or limit <= 0:
        return turns
    trimmed = list(turns)
    # drop whole exchanges so the replayed history still starts with a user turn
    while len(trimmed) > limit:
        del trimmed[:2]
    return trimmed
