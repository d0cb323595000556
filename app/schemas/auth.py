from pydantic import BaseModel, EmailStr, Field
from app.models.user import UserResponse


class UserSignup(BaseModel):
    """Schema for user signup"""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=100)
    phone: str = Field("", max_length=20)
    country_code: str = Field("", max_length=5)
    currency_preference: str = Field("USD", max_length=5)


class UserLogin(BaseModel):
    """Schema for user login"""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Schema for authentication token response"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
