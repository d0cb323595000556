from fastapi import APIRouter, Depends
from app.api.deps import get_user_service
from app.core.auth import get_current_user
from app.models.user import UserResponse
from app.schemas.user import UserProfileUpdate
from app.services.user_service import UserService

router = APIRouter()

@router.get("/me", response_model=UserResponse)
async def get_my_profile(current_user: UserResponse = Depends(get_current_user)):
    """Get current user profile"""
    return current_user

@router.put("/me", response_model=UserResponse)
async def save_my_profile(
    profile: UserProfileUpdate,
    current_user: UserResponse = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service)
):
    """Save name, phone, country code and currency preference"""
    return await user_service.save_profile(current_user.id, profile)
