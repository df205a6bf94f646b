from supabase import Client
from postgrest.exceptions import APIError
from app.config import settings
from app.modules.users.schemas import UserUpdate, UserResponse
from typing import Any, Callable, Dict, Optional
from datetime import datetime, timezone
from fastapi import HTTPException
import logging
import time

logger = logging.getLogger(__name__)

# PostgREST: .single() matched no rows
NOT_FOUND_CODE = "PGRST116"
# Postgres: insufficient_privilege (RLS rejected the row)
PERMISSION_DENIED_CODE = "42501"


def _is_permission_error(error: APIError) -> bool:
    message = (error.message or str(error)).lower()
    return error.code == PERMISSION_DENIED_CODE or "permission" in message


def default_profile_fields(auth_user: Dict[str, Any]) -> Dict[str, Any]:
    """Profile values derived from the auth user: metadata name, else email local part, else 'User'"""
    metadata = auth_user.get("user_metadata") or {}
    email = auth_user.get("email") or ""
    return {
        "id": auth_user["id"],
        "name": metadata.get("name") or email.split("@")[0] or "User",
        "email": email,
        "profile": "",
        "bio": metadata.get("bio") or "",
    }


class UserService:
    def __init__(self, supabase: Client, sleep: Callable[[float], None] = time.sleep):
        self.supabase = supabase
        self.sleep = sleep

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user profile by ID (public read)"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching user profile {user_id}: {e}")
            raise HTTPException(status_code=502, detail="Failed to load profile")

        if not result or not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return UserResponse(**result.data)

    def fetch_user_profile(self, auth_user: Dict[str, Any]) -> Optional[UserResponse]:
        """Load the signed-in user's profile, creating it when the row does not exist yet.

        Returns None when the lookup fails for any other reason.
        """
        user_id = auth_user["id"]
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .single()\
                .execute()
            if result.data:
                return UserResponse(**result.data)
        except APIError as e:
            if e.code != NOT_FOUND_CODE:
                logger.error(f"Error fetching user profile: {e.message}")
                return None
        except Exception as e:
            logger.error(f"Error fetching user profile: {e}")
            return None

        logger.info("User profile not found, creating new profile...")
        return self.create_user_profile(auth_user)

    def create_user_profile(self, auth_user: Dict[str, Any]) -> UserResponse:
        """Insert the profile row.

        Permission errors are retried after a fixed delay (the auth session may not have
        reached the database yet). When retries run out, or on any other failure, a
        temporary profile is returned so the user can keep using the app.
        """
        fields = default_profile_fields(auth_user)
        max_retries = settings.profile_create_max_retries
        logger.info(f"Creating user profile for: {fields['id']} with email: {fields['email']}")

        retry_count = 0
        while True:
            try:
                result = self.supabase.table("users").insert(fields).execute()
                if result.data:
                    logger.info(f"User profile created successfully: {fields['id']}")
                    return UserResponse(**result.data[0])
                logger.error("Error creating user profile: insert returned no row")
                break
            except APIError as e:
                logger.error(
                    f"Error creating user profile: code={e.code} message={e.message} "
                    f"details={e.details} hint={e.hint}"
                )
                if _is_permission_error(e) and retry_count < max_retries:
                    retry_count += 1
                    delay = settings.profile_create_retry_delay_seconds
                    logger.info(f"Permission error, retrying in {delay} seconds...")
                    self.sleep(delay)
                    continue
                break
            except Exception as e:
                logger.error(f"Error creating user profile: {e}")
                break

        logger.info("Creating temporary user profile due to database error")
        now = datetime.now(timezone.utc)
        return UserResponse(**fields, created_at=now, updated_at=now, temporary=True)

    def update_user(self, user_id: str, user_data: UserUpdate) -> UserResponse:
        """Update the caller's own profile; RLS rejects other rows, which surfaces as 404"""
        update_data = user_data.model_dump(exclude_none=True)
        if "name" in update_data:
            update_data["name"] = update_data["name"].strip()
        if not update_data:
            return self.get_user_by_id(user_id)

        try:
            result = self.supabase.table("users")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating profile {user_id}: {e}")
            raise HTTPException(status_code=502, detail="Failed to update profile")

        if not result.data:
            raise HTTPException(status_code=404, detail="User not found")
        return UserResponse(**result.data[0])
