from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, status

from codeassist.core.context import AppContext, get_context
from codeassist.schemas.base import SuccessOut
from codeassist.schemas.chat import (
    ChatSessionCreate,
    ChatSessionEnvelope,
    ChatSessionList,
    ChatSessionOut,
    ChatSessionUpdate,
)
from codeassist.services.chat_service import DEFAULT_SESSION_TITLE

router = APIRouter(prefix='/sessions', tags=['sessions'])


@router.get('', response_model=ChatSessionList)
def list_chat_sessions(ctx: AppContext = Depends(get_context)) -> ChatSessionList:
    sessions = ctx.sessions.list_sessions()
    return ChatSessionList(sessions=[ChatSessionOut.model_validate(record) for record in sessions])


@router.post('', response_model=ChatSessionEnvelope)
def create_chat_session(
    payload: Optional[ChatSessionCreate] = None,
    ctx: AppContext = Depends(get_context),
) -> ChatSessionEnvelope:
    title = payload.title if payload and payload.title is not None else DEFAULT_SESSION_TITLE
    record = ctx.sessions.create_session(str(uuid4()), title)
    return ChatSessionEnvelope(session=ChatSessionOut.model_validate(record))


@router.patch('/{session_id}', response_model=ChatSessionEnvelope)
def update_chat_session(
    session_id: str,
    payload: ChatSessionUpdate,
    ctx: AppContext = Depends(get_context),
) -> ChatSessionEnvelope:
    record = ctx.sessions.update_session_title(session_id, payload.title)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Session not found')
    return ChatSessionEnvelope(session=ChatSessionOut.model_validate(record))


@router.delete('/{session_id}', response_model=SuccessOut)
def delete_chat_session(session_id: str, ctx: AppContext = Depends(get_context)) -> SuccessOut:
    ctx.sessions.delete_session(session_id)
    return SuccessOut()
