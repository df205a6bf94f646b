"""Tests for upload validation against the bucket rules."""
from app.config.storage_config import BUCKETS, PROFILE_PICTURES_BUCKET, USER_VIDEOS_BUCKET, get_bucket_config
from app.modules.media.validators import validate_file, validate_profile_picture, validate_user_video

import pytest

MB = 1024 * 1024


class TestValidateFile:
    def test_accepts_allowed_type_within_limit(self):
        result = validate_file("image/png", 1000, ["image/png"], 5 * MB)
        assert result.valid
        assert result.error is None

    def test_rejects_type_and_lists_allowed(self):
        result = validate_file("application/pdf", 10, ["image/png", "image/gif"], 5 * MB)
        assert not result.valid
        assert result.error == "File type not allowed. Allowed types: image/png, image/gif"

    def test_type_checked_before_size(self):
        result = validate_file("application/pdf", 100 * MB, ["image/png"], 5 * MB)
        assert result.error.startswith("File type not allowed")

    def test_size_equal_to_limit_is_accepted(self):
        assert validate_file("image/png", 5 * MB, ["image/png"], 5 * MB).valid

    def test_one_byte_over_limit_is_rejected(self):
        result = validate_file("image/png", 5 * MB + 1, ["image/png"], 5 * MB)
        assert not result.valid
        assert result.error == "File too large. Maximum size: 5MB"

    def test_limit_rounded_to_whole_megabytes(self):
        result = validate_file("image/png", 10 * MB, ["image/png"], int(2.5 * MB))
        assert result.error == "File too large. Maximum size: 3MB"


class TestPresets:
    @pytest.mark.parametrize("content_type", ["image/jpeg", "image/png", "image/gif", "image/webp"])
    def test_profile_picture_types(self, content_type):
        assert validate_profile_picture(content_type, MB).valid

    def test_profile_picture_rejects_video(self):
        assert not validate_profile_picture("video/mp4", MB).valid

    def test_profile_picture_limit(self):
        result = validate_profile_picture("image/png", 6 * MB)
        assert result.error == "File too large. Maximum size: 5MB"

    @pytest.mark.parametrize("content_type", ["video/mp4", "video/webm", "video/quicktime", "video/x-msvideo"])
    def test_video_types(self, content_type):
        assert validate_user_video(content_type, 40 * MB).valid

    def test_video_limit(self):
        result = validate_user_video("video/mp4", 51 * MB)
        assert result.error == "File too large. Maximum size: 50MB"

    def test_bucket_config(self):
        assert set(BUCKETS) == {PROFILE_PICTURES_BUCKET, USER_VIDEOS_BUCKET}
        with pytest.raises(KeyError):
            get_bucket_config("avatars")
