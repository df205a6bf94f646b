from fastapi import APIRouter, Depends, Query, Request
from app.config import settings
from app.core.dependencies import get_current_user_id, get_user_supabase
from app.core.rate_limit import limiter
from app.modules.tricks.schemas import (
    MagicTrickCreate, MagicTrickUpdate, MagicTrickResponse, MagicTrickWithUserResponse,
    MagicTrickListResponse, GeneratedTrick, TrickGenerationRequest, TrickGenerationResponse,
    CommonItemsResponse
)
from app.modules.tricks.service import TrickService
from supabase import Client
from typing import List, Optional, Dict

router = APIRouter(prefix="/tricks", tags=["tricks"])


def get_trick_service(supabase: Client = Depends(get_user_supabase)) -> TrickService:
    return TrickService(supabase)


@router.get("", response_model=MagicTrickListResponse)
async def list_tricks(
    trick_filter: Optional[str] = Query(None, alias="filter"),
    current_user: Dict = Depends(get_current_user_id),
    service: TrickService = Depends(get_trick_service)
):
    """List all tricks, newest first. filter: Easy, Medium, Hard or "Created by me"."""
    return service.list_tricks(current_user["id"], trick_filter)


@router.get("/with-users", response_model=List[MagicTrickWithUserResponse])
async def list_tricks_with_users(
    current_user: Dict = Depends(get_current_user_id),
    service: TrickService = Depends(get_trick_service)
):
    """List tricks joined with their owner's name, picture and bio"""
    return service.list_tricks_with_users(current_user["id"])


@router.get("/items", response_model=CommonItemsResponse)
async def list_common_items(
    current_user: Dict = Depends(get_current_user_id),
):
    """Household items to pick from when generating a trick"""
    return CommonItemsResponse(
        items=TrickService.common_items(),
        generation_configured=settings.is_claude_configured,
    )


@router.post("/generate", response_model=TrickGenerationResponse)
@limiter.limit(settings.generate_rate_limit)
async def generate_trick(
    request: Request,
    generation_request: TrickGenerationRequest,
    current_user: Dict = Depends(get_current_user_id),
    service: TrickService = Depends(get_trick_service)
):
    """Generate a trick with Claude. The result is not stored until POST /tricks/generated."""
    return service.generate_trick(generation_request)


@router.post("/generated", response_model=MagicTrickResponse, status_code=201)
async def save_generated_trick(
    trick: GeneratedTrick,
    current_user: Dict = Depends(get_current_user_id),
    service: TrickService = Depends(get_trick_service)
):
    """Save a generated trick for the current user"""
    return service.save_generated_trick(trick, current_user["id"])


@router.post("", response_model=MagicTrickResponse, status_code=201)
async def add_trick(
    trick_data: MagicTrickCreate,
    current_user: Dict = Depends(get_current_user_id),
    service: TrickService = Depends(get_trick_service)
):
    """Add a hand-written trick"""
    return service.add_trick(trick_data, current_user["id"])


@router.get("/{trick_id}", response_model=MagicTrickResponse)
async def get_trick(
    trick_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: TrickService = Depends(get_trick_service)
):
    """Get trick by ID"""
    return service.get_trick(trick_id, current_user["id"])


@router.put("/{trick_id}", response_model=MagicTrickResponse)
async def update_trick(
    trick_id: str,
    trick_data: MagicTrickUpdate,
    current_user: Dict = Depends(get_current_user_id),
    service: TrickService = Depends(get_trick_service)
):
    """Update one of the current user's tricks"""
    return service.update_trick(trick_id, trick_data, current_user["id"])


@router.delete("/{trick_id}", status_code=204)
async def delete_trick(
    trick_id: str,
    current_user: Dict = Depends(get_current_user_id),
    service: TrickService = Depends(get_trick_service)
):
    """Delete one of the current user's tricks"""
    service.delete_trick(trick_id)
    return None
