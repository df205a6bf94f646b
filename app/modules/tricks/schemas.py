from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime

Difficulty = Literal["Easy", "Medium", "Hard"]


class MagicTrickCreate(BaseModel):
    title: str
    description: str
    difficulty: Difficulty = "Easy"
    instructions_text: str = ""  # one step per line

    @field_validator("title", "description")
    @classmethod
    def required_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class MagicTrickUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    instructions: Optional[List[str]] = None
    difficulty: Optional[Difficulty] = None
    overall_rating: Optional[float] = Field(default=None, ge=0, le=5)

    @field_validator("title", "description")
    @classmethod
    def required_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class MagicTrickResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    instructions: List[str] = []
    difficulty: Difficulty
    overall_rating: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by_me: bool = False

    class Config:
        from_attributes = True


class MagicTrickWithUserResponse(MagicTrickResponse):
    user_name: Optional[str] = None
    user_profile: Optional[str] = None
    user_bio: Optional[str] = None


class MagicTrickListResponse(BaseModel):
    tricks: List[MagicTrickResponse]
    error: Optional[str] = None  # set when the list fell back to sample tricks


class GeneratedTrick(BaseModel):
    title: str
    description: str
    instructions: List[str]
    difficulty: Difficulty
    items: List[str]


class TrickGenerationRequest(BaseModel):
    items: List[str]
    difficulty: Difficulty = "Easy"
    additional_context: str = ""


class TrickGenerationResponse(BaseModel):
    success: bool
    trick: Optional[GeneratedTrick] = None
    error: Optional[str] = None


class CommonItemsResponse(BaseModel):
    items: List[str]
    generation_configured: bool
