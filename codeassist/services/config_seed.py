from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from codeassist.models.enums import FineTuningMethod
from codeassist.services.config_store import ConfigStore


def _default_parameters() -> dict[str, Any]:
    return {'temperature': 0.7, 'maxLength': 512}


@dataclass(frozen=True)
class PresetModelConfig:
    model_name: str
    base_model: str
    fine_tuning_method: FineTuningMethod = FineTuningMethod.QLORA
    deployment_platform: str = 'huggingface'
    parameters: dict[str, Any] = field(default_factory=_default_parameters)
    is_active: bool = False


PRESET_MODEL_CONFIGS: tuple[PresetModelConfig, ...] = (
    PresetModelConfig(model_name='Code Llama 7B', base_model='codellama', is_active=True),
    PresetModelConfig(model_name='StarCoder 7B', base_model='starcoder'),
    PresetModelConfig(model_name='WizardCoder 7B', base_model='wizardcoder'),
    PresetModelConfig(model_name='Mistral 7B', base_model='mistral'),
)


def seed_model_configs(store: ConfigStore, presets=PRESET_MODEL_CONFIGS) -> int:
    if store.list_configs():
        return 0
    for preset in presets:
        store.create_config(
            {
                'model_name': preset.model_name,
                'base_model': preset.base_model,
                'fine_tuning_method': preset.fine_tuning_method,
                'deployment_platform': preset.deployment_platform,
                'parameters': dict(preset.parameters),
                'is_active': preset.is_active,
            }
        )
    logger.info('config_seed.done', created=len(presets))
    return len(presets)
