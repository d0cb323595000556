from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from datetime import datetime, timezone
from pymongo import ReturnDocument

from app.models.user import UserCreate, UserInDB
from app.core.security import hash_password

class UserRepository:
    """User database operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]

    async def create_user(self, user_data: UserCreate) -> UserInDB:
        """Create a new user."""
        now = datetime.now(timezone.utc)
        user_dict = {
            "name": user_data.name,
            "email": user_data.email,
            "password_hash": hash_password(user_data.password),
            "phone": user_data.phone,
            "country_code": user_data.country_code,
            "currency_preference": user_data.currency_preference,
            "is_deleted": False,
            "created_at": now,
            "updated_at": now
        }

        result = await self.collection.insert_one(user_dict)
        user_dict["_id"] = result.inserted_id
        return UserInDB(**user_dict)

    async def get_user_by_email(self, email: str) -> UserInDB | None:
        """Get user by email."""
        user = await self.collection.find_one({"email": email, "is_deleted": False})
        if user:
            return UserInDB(**user)
        return None

    async def get_user_by_id(self, user_id: str) -> UserInDB | None:
        """Get user by ID. Malformed ids are treated as unknown."""
        if not ObjectId.is_valid(user_id):
            return None
        user = await self.collection.find_one({
            "_id": ObjectId(user_id),
            "is_deleted": False
        })
        if user:
            return UserInDB(**user)
        return None

    async def update_user(self, user_id: str, update_data: dict) -> UserInDB | None:
        """Update user fields."""
        if not ObjectId.is_valid(user_id):
            return None
        update_data["updated_at"] = datetime.now(timezone.utc)
        result = await self.collection.find_one_and_update(
            {"_id": ObjectId(user_id), "is_deleted": False},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER
        )
        if result:
            return UserInDB(**result)
        return None
