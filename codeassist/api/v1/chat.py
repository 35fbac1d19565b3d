from uuid import uuid4

from fastapi import APIRouter, Depends

from codeassist.core.context import AppContext, get_context
from codeassist.schemas.base import SuccessOut
from codeassist.schemas.chat import ChatHistoryOut, ChatMessageOut, ChatRequest, ChatResponse
from codeassist.services.chat_service import process_chat_message

router = APIRouter(prefix='/chat', tags=['chat'])


@router.post('', response_model=ChatResponse, response_model_exclude_none=True)
async def send_chat_message(
    payload: ChatRequest,
    ctx: AppContext = Depends(get_context),
) -> ChatResponse:
    settings = payload.settings
    outcome = await process_chat_message(
        ctx,
        session_id=payload.session_id or str(uuid4()),
        message=payload.message,
        temperature=settings.temperature if settings else None,
        max_length=settings.max_length if settings else None,
    )
    return ChatResponse(
        response=outcome.response,
        session_id=outcome.session_id,
        error=True if outcome.error else None,
    )


@router.get('/{session_id}', response_model=ChatHistoryOut)
def get_chat_history(session_id: str, ctx: AppContext = Depends(get_context)) -> ChatHistoryOut:
    messages = ctx.sessions.list_messages(session_id)
    return ChatHistoryOut(messages=[ChatMessageOut.model_validate(record) for record in messages])


@router.delete('/{session_id}', response_model=SuccessOut)
def clear_chat_history(session_id: str, ctx: AppContext = Depends(get_context)) -> SuccessOut:
    ctx.sessions.clear_messages(session_id)
    return SuccessOut()
