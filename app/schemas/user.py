from pydantic import BaseModel, Field


class UserProfileUpdate(BaseModel):
    """Caller's own profile as edited in the settings dialog."""
    name: str
    phone: str = Field(..., max_length=20)
    country_code: str = Field("", max_length=5)
    currency_preference: str = Field("USD", max_length=5)
