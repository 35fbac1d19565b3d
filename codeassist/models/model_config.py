from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from codeassist.models.base import timestamp_field
from codeassist.models.enums import FineTuningMethod, enum_column


class ModelConfig(SQLModel, table=True):
    __tablename__ = 'model_configs'
    __table_args__ = {'sqlite_autoincrement': True}

    id: Optional[int] = Field(default=None, primary_key=True)
    model_name: str
    base_model: str
    fine_tuning_method: FineTuningMethod = Field(
        sa_column=enum_column(FineTuningMethod, 'fine_tuning_method')
    )
    deployment_platform: str
    parameters: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    is_active: bool = Field(default=False, index=True)
    created_at: datetime = timestamp_field()
