from pydantic import Field, StrictFloat, StrictInt

from codeassist.schemas.base import CamelModel


class GenerationSettingsIn(CamelModel):
    temperature: StrictFloat = Field(..., ge=0, le=1)
    max_length: StrictInt = Field(..., gt=0)


class GenerationSettingsOut(CamelModel):
    success: bool = True
    settings: GenerationSettingsIn


class UploadProcessOut(CamelModel):
    success: bool = True
    message: str
