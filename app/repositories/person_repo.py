from typing import List, Optional
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.db.mongo import next_sequence
from app.models.person import PersonProfile


class PersonRepository:
    """Person profile database operations. Profiles are only ever soft-deleted."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["people"]

    async def create_person(
        self,
        owner_id: str,
        name: str,
        linked_user_id: Optional[str] = None
    ) -> PersonProfile:
        """Create a person profile with the next counter id."""
        person_id = await next_sequence(self.db, "people")
        person = PersonProfile(
            id=person_id,
            owner_id=owner_id,
            name=name,
            linked_user_id=linked_user_id
        )
        await self.collection.insert_one(person.model_dump(by_alias=True))
        return person

    async def get_person(self, person_id: int, owner_id: str) -> Optional[PersonProfile]:
        doc = await self.collection.find_one({
            "_id": person_id,
            "owner_id": owner_id,
            "is_deleted": False
        })
        if doc:
            return PersonProfile(**doc)
        return None

    async def find_linked_person(self, owner_id: str, linked_user_id: str) -> Optional[PersonProfile]:
        """Profile on owner's book that stands for another registered user."""
        doc = await self.collection.find_one({
            "owner_id": owner_id,
            "linked_user_id": linked_user_id,
            "is_deleted": False
        })
        if doc:
            return PersonProfile(**doc)
        return None

    async def list_people(self, owner_id: str) -> List[PersonProfile]:
        cursor = self.collection.find({
            "owner_id": owner_id,
            "is_deleted": False
        }).sort("_id", 1)
        docs = await cursor.to_list(None)
        return [PersonProfile(**doc) for doc in docs]

    async def update_person(self, person_id: int, owner_id: str, updates: dict) -> Optional[PersonProfile]:
        updates["updated_at"] = datetime.now(timezone.utc)
        result = await self.collection.find_one_and_update(
            {"_id": person_id, "owner_id": owner_id, "is_deleted": False},
            {"$set": updates},
            return_document=ReturnDocument.AFTER
        )
        if result:
            return PersonProfile(**result)
        return None

    async def soft_delete_person(self, person_id: int, owner_id: str) -> bool:
        """Hide a profile. Its ledger entries are kept."""
        result = await self.collection.update_one(
            {"_id": person_id, "owner_id": owner_id, "is_deleted": False},
            {"$set": {
                "is_deleted": True,
                "updated_at": datetime.now(timezone.utc)
            }}
        )
        return result.modified_count > 0
