from fastapi import APIRouter, Depends, UploadFile, File, Form
from app.modules.media.schemas import MediaItem, MediaType, UploadResult
from app.modules.media.service import MediaService
from app.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/media", tags=["media"])


def get_media_service(supabase: Client = Depends(get_user_supabase)) -> MediaService:
    return MediaService(supabase)


@router.get("", response_model=List[MediaItem])
async def list_media(
    current_user: Dict = Depends(get_current_user_id),
    service: MediaService = Depends(get_media_service)
):
    """List the current user's gallery, newest first"""
    return service.list_media(current_user["id"])


@router.post("", response_model=UploadResult, status_code=201)
async def upload_media(
    file: UploadFile = File(...),
    type: MediaType = Form(...),
    current_user: Dict = Depends(get_current_user_id),
    service: MediaService = Depends(get_media_service)
):
    """
    Upload an image or a video to the gallery.
    Images follow the profile picture rules (5MB, jpeg/png/gif/webp),
    videos the video rules (50MB, mp4/webm/quicktime/x-msvideo).
    """
    return await service.upload_media(file, type, current_user["id"])


@router.delete("/{filename}", status_code=204)
async def delete_media(
    filename: str,
    current_user: Dict = Depends(get_current_user_id),
    service: MediaService = Depends(get_media_service)
):
    """Delete a file from the current user's gallery"""
    service.delete_media(current_user["id"], filename)
    return None
