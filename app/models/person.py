from typing import Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PersonProfile(BaseModel):
    """
    Someone the caller lends to or borrows from.

    approval_status is the "settled" flag. It may only be switched on while
    the remaining balance over approved entries is zero.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(validation_alias="_id", serialization_alias="_id")
    owner_id: str
    name: str
    approval_status: bool = False
    linked_user_id: Optional[str] = None  # set on profiles created for mirrored entries

    is_deleted: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
