from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

UPLOADS_URL_PREFIX = "/sounds/uploads"


class SoundRecord(BaseModel):
    """Metadata view of one stored sound file."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    path: str
    size: int
    upload_date: datetime = Field(alias="uploadDate")


class DeleteRequest(BaseModel):
    id: Optional[str] = None


class DeleteResponse(BaseModel):
    success: Literal[True] = True


class ErrorResponse(BaseModel):
    error: str


def public_path(sound_id: str) -> str:
    return f"{UPLOADS_URL_PREFIX}/{sound_id}"
