import math
from typing import List

from app.config.storage_config import (
    PROFILE_PICTURES_BUCKET,
    USER_VIDEOS_BUCKET,
    get_bucket_config,
)
from app.modules.media.schemas import FileValidation


def validate_file(
    content_type: str,
    size: int,
    allowed_types: List[str],
    max_size_bytes: int,
) -> FileValidation:
    """Check a file's MIME type against an allow-list, then its size against a byte limit."""
    if content_type not in allowed_types:
        return FileValidation(
            valid=False,
            error=f"File type not allowed. Allowed types: {', '.join(allowed_types)}",
        )

    if size > max_size_bytes:
        max_size_mb = math.floor(max_size_bytes / (1024 * 1024) + 0.5)
        return FileValidation(valid=False, error=f"File too large. Maximum size: {max_size_mb}MB")

    return FileValidation(valid=True)


def validate_profile_picture(content_type: str, size: int) -> FileValidation:
    bucket = get_bucket_config(PROFILE_PICTURES_BUCKET)
    return validate_file(content_type, size, bucket["allowed_types"], bucket["max_size_bytes"])


def validate_user_video(content_type: str, size: int) -> FileValidation:
    bucket = get_bucket_config(USER_VIDEOS_BUCKET)
    return validate_file(content_type, size, bucket["allowed_types"], bucket["max_size_bytes"])
