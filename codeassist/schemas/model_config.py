from datetime import datetime
from typing import Any, Optional

from pydantic import ConfigDict, StrictBool, StrictStr

from codeassist.models.enums import FineTuningMethod
from codeassist.schemas.base import CamelModel


class ModelConfigOut(CamelModel):
    id: int
    model_name: str
    base_model: str
    fine_tuning_method: FineTuningMethod
    deployment_platform: str
    parameters: dict[str, Any]
    is_active: bool
    created_at: datetime


class ModelConfigUpdate(CamelModel):
    model_config = ConfigDict(extra='forbid')

    model_name: Optional[StrictStr] = None
    base_model: Optional[StrictStr] = None
    fine_tuning_method: Optional[FineTuningMethod] = None
    deployment_platform: Optional[StrictStr] = None
    parameters: Optional[dict[str, Any]] = None
    is_active: Optional[StrictBool] = None


class ModelConfigList(CamelModel):
    models: list[ModelConfigOut]


class ModelConfigEnvelope(CamelModel):
    model: ModelConfigOut
