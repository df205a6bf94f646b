from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime

MediaType = Literal["image", "video"]


class FileValidation(BaseModel):
    valid: bool
    error: Optional[str] = None


class UploadResult(BaseModel):
    success: bool
    url: Optional[str] = None
    path: Optional[str] = None
    error: Optional[str] = None


class DeleteResult(BaseModel):
    success: bool
    not_found: bool = False
    error: Optional[str] = None


class MediaItem(BaseModel):
    id: str
    url: str
    filename: str
    path: str
    type: MediaType
    size: int = 0
    uploaded_at: Optional[datetime] = None
