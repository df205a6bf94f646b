"""Supabase Storage wrapper for profile pictures and user videos."""
import logging
import os
import time
from typing import List, Optional
from urllib.parse import urlparse

from supabase import Client

from app.config.storage_config import (
    PROFILE_PICTURES_BUCKET,
    USER_VIDEOS_BUCKET,
    UPLOAD_CACHE_CONTROL,
    get_bucket_config,
)
from app.modules.media.schemas import UploadResult, DeleteResult

logger = logging.getLogger(__name__)


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def _extension(filename: Optional[str], default: str) -> str:
    ext = os.path.splitext(filename or "")[1].lstrip(".")
    return ext or default


class SupabaseStorage:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def upload_file(
        self,
        bucket: str,
        path: str,
        file_content: bytes,
        content_type: str,
        user_id: str,
    ) -> UploadResult:
        """Upload under the owner's folder (<user_id>/<path>), overwriting, and return the public URL"""
        full_path = f"{user_id}/{path}"
        try:
            self.supabase.storage.from_(bucket).upload(
                full_path,
                file_content,
                file_options={
                    "content-type": content_type,
                    "cache-control": UPLOAD_CACHE_CONTROL,
                    "upsert": "true",
                },
            )
        except Exception as e:
            logger.error(f"Upload error ({bucket}/{full_path}): {e}")
            return UploadResult(success=False, error=str(e))

        url = self.get_public_url(bucket, full_path)
        logger.info(f"Uploaded {bucket}/{full_path}")
        return UploadResult(success=True, url=url, path=full_path)

    def upload_profile_picture(
        self, file_content: bytes, content_type: str, filename: Optional[str], user_id: str
    ) -> UploadResult:
        ext = _extension(filename, get_bucket_config(PROFILE_PICTURES_BUCKET)["default_extension"])
        name = f"profile_{_timestamp_ms()}.{ext}"
        return self.upload_file(PROFILE_PICTURES_BUCKET, name, file_content, content_type, user_id)

    def upload_user_video(
        self,
        file_content: bytes,
        content_type: str,
        filename: Optional[str],
        user_id: str,
        custom_name: Optional[str] = None,
    ) -> UploadResult:
        ext = _extension(filename, get_bucket_config(USER_VIDEOS_BUCKET)["default_extension"])
        prefix = custom_name or "video"
        name = f"{prefix}_{_timestamp_ms()}.{ext}"
        return self.upload_file(USER_VIDEOS_BUCKET, name, file_content, content_type, user_id)

    def delete_file(self, bucket: str, path: str) -> DeleteResult:
        try:
            removed = self.supabase.storage.from_(bucket).remove([path])
        except Exception as e:
            logger.error(f"Delete error ({bucket}/{path}): {e}")
            return DeleteResult(success=False, error=str(e))
        # remove() returns the deleted objects
        if not removed:
            logger.warning(f"Delete of missing object {bucket}/{path}")
            return DeleteResult(success=False, not_found=True, error="File not found")
        return DeleteResult(success=True)

    def delete_profile_picture(self, user_id: str, filename: str) -> DeleteResult:
        return self.delete_file(PROFILE_PICTURES_BUCKET, f"{user_id}/{filename}")

    def delete_user_video(self, user_id: str, filename: str) -> DeleteResult:
        return self.delete_file(USER_VIDEOS_BUCKET, f"{user_id}/{filename}")

    def delete_replaced_profile_picture(self, old_url: Optional[str], user_id: str) -> Optional[DeleteResult]:
        """Delete a picture that is no longer the user's profile picture.

        Only objects in the user's own folder of profile_pictures are touched;
        external URLs and other users' files are left alone.
        """
        if not old_url or f"/public/{PROFILE_PICTURES_BUCKET}/" not in old_url:
            return None
        if extract_user_id_from_url(old_url) != user_id:
            return None
        filename = extract_filename_from_url(old_url)
        if not filename:
            return None
        logger.info(f"Removing replaced profile picture {user_id}/{filename}")
        return self.delete_profile_picture(user_id, filename)

    def get_public_url(self, bucket: str, path: str) -> str:
        url = self.supabase.storage.from_(bucket).get_public_url(path)
        # Older storage clients return {"publicURL": ...}
        if isinstance(url, dict):
            return url.get("publicUrl") or url.get("publicURL") or ""
        return url

    def list_folder(self, bucket: str, user_id: str) -> List[dict]:
        return self.supabase.storage.from_(bucket).list(user_id) or []


def extract_filename_from_url(url: str) -> Optional[str]:
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return None
    return parsed.path.split("/")[-1]


def extract_user_id_from_url(url: str) -> Optional[str]:
    """Owner id from a public object URL: /storage/v1/object/public/<bucket>/<user_id>/<filename>"""
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        return None
    parts = parsed.path.split("/")
    if "public" not in parts:
        return None
    index = parts.index("public") + 2
    if index >= len(parts):
        return None
    return parts[index] or None
