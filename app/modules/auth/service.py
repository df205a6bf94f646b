import logging
import time
from supabase import Client
from fastapi import HTTPException
from typing import Any, Callable, Dict, MutableMapping, Optional

from app.database.supabase_client import SupabaseClient
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    StoredSession, StoredAuthState, CurrentUserResponse
)
from app.modules.auth.session_cache import SessionCache
from app.modules.users.schemas import UserResponse
from app.modules.users.service import UserService

logger = logging.getLogger(__name__)


def user_to_dict(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": user.user_metadata or {},
        "app_metadata": user.app_metadata or {},
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


class AuthService:
    def __init__(
        self,
        supabase: Client,
        user_client_factory: Callable[[str], Client] = SupabaseClient.get_user_client,
        store: Optional[MutableMapping[str, str]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.supabase = supabase
        self.user_client_factory = user_client_factory
        self.store = store
        self.clock = clock

    def session_cache(self, token: str) -> SessionCache:
        return SessionCache.for_token(token, store=self.store, clock=self.clock)

    def user_service(self, token: str) -> UserService:
        return UserService(self.user_client_factory(token))

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user; name and bio travel as user metadata until the profile row is created"""
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": {
                        "name": register_data.name,
                        "bio": register_data.bio,
                    }
                }
            })
        except Exception as e:
            error_message = str(e)
            logger.error(f"Registration failed: {error_message}")
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=400, detail=error_message or "Registration failed")

        if not auth_response.user:
            raise HTTPException(status_code=400, detail="Failed to register user")

        return RegisterResponse(
            user_id=auth_response.user.id,
            email=auth_response.user.email or register_data.email,
            message="Check your email for verification link!"
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Sign in, mirror user and session into the session cache, then load or create the profile"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            error_message = str(e)
            logger.warning(f"Login failed for {login_data.email}: {error_message}")
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=401, detail=error_message or "Login failed")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        session = auth_response.session
        user_data = user_to_dict(auth_response.user)
        cache = self.session_cache(session.access_token)
        cache.save_session(StoredSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            user=user_data,
        ).model_dump())

        # A missing profile must not block sign-in
        profile_data = None
        try:
            profile = self.user_service(session.access_token).fetch_user_profile(user_data)
            if profile:
                profile_data = profile.model_dump(mode="json")
        except Exception as e:
            logger.error(f"Error fetching user profile during login: {e}")
        cache.save_auth_state(StoredAuthState(
            user=user_data, user_profile=profile_data, last_sync=self.clock()
        ))

        return TokenResponse(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=session.expires_at,
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve the token's user: from the session cache while fresh, else from Supabase Auth"""
        user_data, _ = self._resolve_user(token)
        return user_data

    def _resolve_user(self, token: str):
        """Cached user while the mirror is fresh and the cached session has not expired.

        Only a login stores a session with an expiry. A token first seen here is
        verified with Supabase Auth on every call.
        """
        cache = self.session_cache(token)
        if cache.has_valid_stored_auth():
            session = cache.get_session() or {}
            expires_at = session.get("expires_at")
            if not expires_at:
                logger.debug("No cached session expiry, verifying with Supabase")
            elif expires_at <= self.clock():
                logger.info("Cached session token has expired, verifying with Supabase")
            else:
                user_data = cache.get_user()
                if user_data:
                    return user_data, True

        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.warning(f"Error getting session: {e}")
            cache.clear_all()
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

        if not user_response or not user_response.user:
            cache.clear_all()
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        user_data = user_to_dict(user_response.user)
        cache.save_user(user_data)
        return user_data, False

    def get_current_user_with_profile(self, token: str) -> CurrentUserResponse:
        user_data, restored = self._resolve_user(token)
        cache = self.session_cache(token)
        profile = cache.get_auth_state().user_profile
        if profile is None:
            fetched = self.user_service(token).fetch_user_profile(user_data)
            if fetched:
                profile = fetched.model_dump(mode="json")
                cache.save_user_profile(profile)
        return CurrentUserResponse(user=user_data, profile=profile, restored_from_cache=restored)

    def retry_profile_creation(self, token: str) -> UserResponse:
        user_data = self.get_current_user(token)
        logger.info(f"Retrying profile creation for user: {user_data['id']}")
        profile = self.user_service(token).create_user_profile(user_data)
        self.session_cache(token).save_user_profile(profile.model_dump(mode="json"))
        return profile

    def cache_profile(self, token: str, profile: UserResponse) -> None:
        self.session_cache(token).save_user_profile(profile.model_dump(mode="json"))

    def logout(self, token: str) -> bool:
        """Revoke the token with Supabase Auth and clear its session cache entry"""
        self.session_cache(token).clear_all()
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
