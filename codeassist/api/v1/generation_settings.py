from fastapi import APIRouter, Depends

from codeassist.core.context import AppContext, get_context
from codeassist.schemas.settings import GenerationSettingsIn, GenerationSettingsOut

router = APIRouter(prefix='/settings', tags=['settings'])


@router.post('', response_model=GenerationSettingsOut)
def update_generation_settings(
    payload: GenerationSettingsIn,
    ctx: AppContext = Depends(get_context),
) -> GenerationSettingsOut:
    ctx.gateway.update_settings(temperature=payload.temperature, max_output_tokens=payload.max_length)
    return GenerationSettingsOut(settings=payload)
