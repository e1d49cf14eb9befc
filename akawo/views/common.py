"""Common response schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Localized failure message plus its spoken rendition when available."""

    message: str
    audio_content: Optional[str] = Field(default=None, alias="audioContent")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    detail: ErrorDetail | str


class SuccessResponse(BaseModel):
    message: str
    data: Optional[dict] = None
