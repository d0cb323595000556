from typing import List, Optional
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongo import next_sequence
from app.models.group import TravelGroup


class GroupRepository:
    """Travel group operations. Members and expenses are embedded in the group document."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["groups"]

    async def create_group(
        self,
        owner_id: str,
        name: str,
        description: str = "",
        currency: str = "USD"
    ) -> TravelGroup:
        group_id = await next_sequence(self.db, "groups")
        group = TravelGroup(
            id=group_id,
            owner_id=owner_id,
            name=name,
            description=description,
            currency=currency
        )
        await self.collection.insert_one(group.model_dump(by_alias=True))
        return group

    async def get_group(self, group_id: int, owner_id: str) -> Optional[TravelGroup]:
        doc = await self.collection.find_one({
            "_id": group_id,
            "owner_id": owner_id,
            "is_deleted": False
        })
        if doc:
            return TravelGroup(**doc)
        return None

    async def list_groups(self, owner_id: str) -> List[TravelGroup]:
        cursor = self.collection.find({
            "owner_id": owner_id,
            "is_deleted": False
        }).sort("created_at", -1)
        docs = await cursor.to_list(None)
        return [TravelGroup(**doc) for doc in docs]

    async def save_group(self, group: TravelGroup) -> TravelGroup:
        """Replace the stored group with this version."""
        group = group.model_copy(update={"updated_at": datetime.now(timezone.utc)})
        await self.collection.replace_one(
            {"_id": group.id, "owner_id": group.owner_id},
            group.model_dump(by_alias=True)
        )
        return group

    async def soft_delete_group(self, group_id: int, owner_id: str) -> bool:
        result = await self.collection.update_one(
            {"_id": group_id, "owner_id": owner_id, "is_deleted": False},
            {"$set": {
                "is_deleted": True,
                "updated_at": datetime.now(timezone.utc)
            }}
        )
        return result.modified_count > 0
