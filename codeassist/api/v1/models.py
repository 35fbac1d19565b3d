from fastapi import APIRouter, Depends, HTTPException, status

from codeassist.core.context import AppContext, get_context
from codeassist.models.model_config import ModelConfig
from codeassist.schemas.model_config import (
    ModelConfigEnvelope,
    ModelConfigList,
    ModelConfigOut,
    ModelConfigUpdate,
)

router = APIRouter(prefix='/models', tags=['models'])


def _envelope(record: ModelConfig | None, detail: str = 'Model not found') -> ModelConfigEnvelope:
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return ModelConfigEnvelope(model=ModelConfigOut.model_validate(record))


@router.get('', response_model=ModelConfigList)
def list_model_configs(ctx: AppContext = Depends(get_context)) -> ModelConfigList:
    return ModelConfigList(models=[ModelConfigOut.model_validate(record) for record in ctx.configs.list_configs()])


@router.get('/active', response_model=ModelConfigEnvelope)
def get_active_model_config(ctx: AppContext = Depends(get_context)) -> ModelConfigEnvelope:
    return _envelope(ctx.configs.get_active_config(), detail='No active model found')


@router.post('/{config_id}/activate', response_model=ModelConfigEnvelope)
def activate_model_config(config_id: int, ctx: AppContext = Depends(get_context)) -> ModelConfigEnvelope:
    return _envelope(ctx.configs.set_active_config(config_id))


@router.post('/{config_id}/update', response_model=ModelConfigEnvelope)
def update_model_config(
    config_id: int,
    payload: ModelConfigUpdate,
    ctx: AppContext = Depends(get_context),
) -> ModelConfigEnvelope:
    return _envelope(ctx.configs.update_config(config_id, payload.model_dump(exclude_unset=True)))
