import logging

from fastapi import APIRouter, HTTPException, status, Depends
from app.core.auth import create_access_token, get_user_repository
from app.core.security import verify_password
from app.models.user import UserCreate
from app.repositories.user_repo import UserRepository
from app.schemas.auth import UserSignup, UserLogin, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    user_repo: UserRepository = Depends(get_user_repository)
):
    """Create a new user account."""
    existing_user = await user_repo.get_user_by_email(user_data.email)
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    user = await user_repo.create_user(UserCreate(**user_data.model_dump()))
    logger.info("User %s signed up", user.id)

    return TokenResponse(
        access_token=create_access_token(str(user.id)),
        user=user.to_response()
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    user_repo: UserRepository = Depends(get_user_repository)
):
    """Login with email and password."""
    user = await user_repo.get_user_by_email(credentials.email)
    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    return TokenResponse(
        access_token=create_access_token(str(user.id)),
        user=user.to_response()
    )
