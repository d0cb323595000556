import logging
import re

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.user import UserResponse
from app.repositories.user_repo import UserRepository
from app.schemas.user import UserProfileUpdate
from app.utils.ledger_validation import validate_currency, validate_name

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def validate_phone(phone: str) -> str:
    """E.164-style check: 6 to 15 digits once punctuation is stripped."""
    trimmed = (phone or "").strip()
    if not trimmed:
        raise ValidationError("Please enter your phone number")
    digits = _NON_DIGITS.sub("", trimmed)
    if not 6 <= len(digits) <= 15:
        raise ValidationError("Please enter a valid phone number (6-15 digits)")
    return trimmed


class UserService:
    """The caller's own profile."""

    def __init__(self, user_repo: UserRepository):
        self.user_repo = user_repo

    async def get_profile(self, user_id: str) -> UserResponse:
        user = await self.user_repo.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user.to_response()

    async def save_profile(self, user_id: str, profile: UserProfileUpdate) -> UserResponse:
        updates = {
            "name": validate_name(profile.name),
            "phone": validate_phone(profile.phone),
            "country_code": profile.country_code.strip().upper(),
            "currency_preference": validate_currency(
                profile.currency_preference, settings.DEFAULT_CURRENCY
            ),
        }
        user = await self.user_repo.update_user(user_id, updates)
        if user is None:
            raise NotFoundError("User not found")
        logger.info("Profile updated for %s", user_id)
        return user.to_response()
