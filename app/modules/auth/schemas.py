from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional, Dict, Any


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: str = "bearer"
    user_id: str
    email: str
    redirect_to: str = "/magic-tricks"


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: str
    bio: str = ""

    @field_validator("name")
    @classmethod
    def name_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("bio")
    @classmethod
    def strip_bio(cls, v: str) -> str:
        return v.strip()


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str


class StoredSession(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    user: Dict[str, Any]


class StoredAuthState(BaseModel):
    user: Optional[Dict[str, Any]] = None
    user_profile: Optional[Dict[str, Any]] = None
    last_sync: float = 0


class CurrentUserResponse(BaseModel):
    user: Dict[str, Any]
    profile: Optional[Dict[str, Any]] = None
    restored_from_cache: bool = False
