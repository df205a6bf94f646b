"""
Storage bucket configuration.
Mirrors the bucket policies set up in Supabase (file_size_limit, allowed_mime_types);
uploads are checked against these before they are sent.
"""

PROFILE_PICTURES_BUCKET = "profile_pictures"
USER_VIDEOS_BUCKET = "user_videos"

BUCKETS = {
    PROFILE_PICTURES_BUCKET: {
        "public": True,
        "max_size_bytes": 5 * 1024 * 1024,  # 5MB
        "allowed_types": ["image/jpeg", "image/png", "image/gif", "image/webp"],
        "default_extension": "jpg",
    },
    USER_VIDEOS_BUCKET: {
        "public": True,
        "max_size_bytes": 50 * 1024 * 1024,  # 50MB
        "allowed_types": ["video/mp4", "video/webm", "video/quicktime", "video/x-msvideo"],
        "default_extension": "mp4",
    },
}

UPLOAD_CACHE_CONTROL = "3600"


def get_bucket_config(bucket: str) -> dict:
    if bucket not in BUCKETS:
        raise KeyError(f"Unknown storage bucket: {bucket}")
    return BUCKETS[bucket]
