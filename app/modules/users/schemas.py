from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

BIO_MAX_LENGTH = 500


class UserUpdate(BaseModel):
    name: Optional[str] = None
    bio: Optional[str] = None
    profile: Optional[str] = None  # profile picture URL

    @field_validator("name")
    @classmethod
    def name_required(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Name is required")
        return v

    @field_validator("bio")
    @classmethod
    def bio_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > BIO_MAX_LENGTH:
            raise ValueError(f"Bio must be {BIO_MAX_LENGTH} characters or less")
        return v


class UserResponse(BaseModel):
    id: str
    name: str
    profile: Optional[str] = ""
    email: str
    bio: Optional[str] = ""
    created_at: datetime
    updated_at: Optional[datetime] = None
    temporary: bool = False  # True when the row could not be written and exists only in the session cache

    class Config:
        from_attributes = True
