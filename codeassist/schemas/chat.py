from datetime import datetime
from typing import Optional

from pydantic import Field, StrictBool, StrictFloat, StrictInt, StrictStr

from codeassist.models.enums import ChatRole
from codeassist.schemas.base import CamelModel


class ChatSettingsIn(CamelModel):
    temperature: StrictFloat = Field(..., ge=0, le=1)
    max_length: StrictInt = Field(..., gt=0)
    syntax_highlighting: Optional[StrictBool] = None
    dark_mode: Optional[StrictBool] = None
    auto_scroll: Optional[StrictBool] = None


class ChatRequest(CamelModel):
    message: StrictStr
    # an empty id is accepted and treated like a missing one
    session_id: Optional[StrictStr] = None
    settings: Optional[ChatSettingsIn] = None


class ChatResponse(CamelModel):
    response: str
    session_id: str
    error: Optional[bool] = None


class ChatMessageOut(CamelModel):
    id: int
    session_id: str
    content: str
    role: ChatRole
    timestamp: datetime


class ChatHistoryOut(CamelModel):
    messages: list[ChatMessageOut]


class ChatSessionCreate(CamelModel):
    title: Optional[StrictStr] = None


class ChatSessionUpdate(CamelModel):
    title: StrictStr


class ChatSessionOut(CamelModel):
    id: str
    title: str
    created_at: datetime
    updated_at: datetime


class ChatSessionEnvelope(CamelModel):
    session: ChatSessionOut


class ChatSessionList(CamelModel):
    sessions: list[ChatSessionOut]
