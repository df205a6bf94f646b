from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import UserUpdate, UserResponse
from app.modules.users.service import UserService
from app.modules.auth.service import AuthService
from app.modules.media.schemas import UploadResult
from app.modules.media.supabase_storage import SupabaseStorage
from app.modules.media.validators import validate_profile_picture
from app.core.dependencies import (
    get_current_user_id, get_current_token, get_user_supabase, get_auth_service
)
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_user_supabase)) -> UserService:
    return UserService(supabase)


def get_public_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("/me", response_model=UserResponse)
async def get_my_profile(
    current_user: Dict = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    """Get the current user's profile, creating it on first access"""
    profile = service.fetch_user_profile(current_user)
    if profile is None:
        raise HTTPException(status_code=502, detail="Failed to load profile")
    return profile


@router.put("/me", response_model=UserResponse)
async def update_my_profile(
    user_data_body: UserUpdate,
    current_user: Dict = Depends(get_current_user_id),
    token: str = Depends(get_current_token),
    service: UserService = Depends(get_user_service),
    auth_service: AuthService = Depends(get_auth_service),
    supabase: Client = Depends(get_user_supabase)
):
    """
    Update name, bio or profile picture URL of the current user.
    A replaced picture uploaded by the user is deleted from storage.
    """
    previous_picture = None
    if user_data_body.profile is not None:
        previous_picture = service.get_user_by_id(current_user["id"]).profile

    profile = service.update_user(current_user["id"], user_data_body)
    auth_service.cache_profile(token, profile)

    if previous_picture and previous_picture != profile.profile:
        SupabaseStorage(supabase).delete_replaced_profile_picture(previous_picture, current_user["id"])
    return profile


@router.post("/me/picture", response_model=UploadResult, status_code=201)
async def upload_profile_picture(
    file: UploadFile = File(...),
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_user_supabase)
):
    """
    Upload a profile picture to the profile_pictures bucket.
    Returns the public URL; save it with PUT /users/me to apply it.
    """
    content = await file.read()
    content_type = file.content_type or ""
    validation = validate_profile_picture(content_type, len(content))
    if not validation.valid:
        raise HTTPException(status_code=400, detail=validation.error or "Invalid file")

    result = SupabaseStorage(supabase).upload_profile_picture(
        content, content_type, file.filename, current_user["id"]
    )
    if not result.success:
        raise HTTPException(status_code=502, detail=result.error or "Upload failed")
    return result


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    service: UserService = Depends(get_public_user_service)
):
    """Get user profile by ID (profiles are public)"""
    return service.get_user_by_id(user_id)
