from fastapi import APIRouter, Depends
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, CurrentUserResponse
)
from app.modules.auth.service import AuthService
from app.modules.users.schemas import UserResponse
from app.core.dependencies import get_auth_service, get_current_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout, revoke the token and clear the session cache"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Current user and profile; served from the session cache while it is fresh"""
    return service.get_current_user_with_profile(token)


@router.post("/profile/retry", response_model=UserResponse)
async def retry_profile_creation(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Retry creating the profile row after a failed first attempt"""
    return service.retry_profile_creation(token)
