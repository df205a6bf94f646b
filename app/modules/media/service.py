from supabase import Client
from fastapi import HTTPException, UploadFile
from typing import List
import logging

from app.config.storage_config import USER_VIDEOS_BUCKET
from app.modules.media.schemas import MediaItem, MediaType, UploadResult, FileValidation
from app.modules.media.supabase_storage import SupabaseStorage
from app.modules.media.validators import validate_profile_picture, validate_user_video

logger = logging.getLogger(__name__)

# Supabase creates this object to keep an empty folder alive
_PLACEHOLDER_NAME = ".emptyFolderPlaceholder"


class MediaService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.storage = SupabaseStorage(supabase)

    @staticmethod
    def validate(media_type: MediaType, content_type: str, size: int) -> FileValidation:
        if media_type == "image":
            return validate_profile_picture(content_type, size)
        return validate_user_video(content_type, size)

    def list_media(self, user_id: str) -> List[MediaItem]:
        """List the gallery: everything in the user's folder of the user_videos bucket"""
        try:
            objects = self.storage.list_folder(USER_VIDEOS_BUCKET, user_id)
        except Exception as e:
            logger.error(f"Error listing media for {user_id}: {e}")
            raise HTTPException(status_code=502, detail="Failed to load media. Please try again.")

        items = []
        for obj in objects:
            name = obj.get("name")
            if not name or name == _PLACEHOLDER_NAME:
                continue
            metadata = obj.get("metadata") or {}
            mimetype = metadata.get("mimetype") or ""
            path = f"{user_id}/{name}"
            items.append(MediaItem(
                id=obj.get("id") or path,
                url=self.storage.get_public_url(USER_VIDEOS_BUCKET, path),
                filename=name,
                path=path,
                type="image" if mimetype.startswith("image/") or name.startswith("image_") else "video",
                size=metadata.get("size") or 0,
                uploaded_at=obj.get("created_at"),
            ))
        items.sort(key=lambda item: item.uploaded_at.timestamp() if item.uploaded_at else 0, reverse=True)
        return items

    async def upload_media(self, file: UploadFile, media_type: MediaType, user_id: str) -> UploadResult:
        """Validate by media type and store in the user_videos bucket"""
        content = await file.read()
        content_type = file.content_type or ""
        validation = self.validate(media_type, content_type, len(content))
        if not validation.valid:
            raise HTTPException(status_code=400, detail=validation.error or "Invalid file")

        result = self.storage.upload_user_video(
            content, content_type, file.filename, user_id, custom_name=media_type
        )
        if not result.success:
            raise HTTPException(status_code=502, detail=result.error or "Upload failed")
        return result

    def delete_media(self, user_id: str, filename: str) -> None:
        result = self.storage.delete_user_video(user_id, filename)
        if result.not_found:
            raise HTTPException(status_code=404, detail="File not found")
        if not result.success:
            raise HTTPException(status_code=502, detail=result.error or "Delete failed")
