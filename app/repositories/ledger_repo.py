"""
LedgerRepository - Append-only storage for ledger entries.

Entries are inserted once and never deleted. The only write after insert
is a status change, done as a compare-and-set on the current status so
two racing decisions on the same entry cannot both win.
"""

from typing import List, Optional, Iterable
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.db.mongo import next_sequence
from app.models.ledger import LedgerEntry, LedgerStatus


class LedgerRepository:
    """Repository for ledger entries."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db.ledger_entries

    async def allocate_ids(self, count: int = 1) -> List[int]:
        """Reserve consecutive, monotonically increasing entry ids."""
        first = await next_sequence(self.db, "ledger_entries", count)
        return list(range(first, first + count))

    async def insert_entries(self, entries: List[LedgerEntry]) -> List[LedgerEntry]:
        """Insert entries whose ids were reserved with allocate_ids."""
        if entries:
            await self.collection.insert_many(
                [entry.to_document() for entry in entries],
                ordered=True
            )
        return entries

    async def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        doc = await self.collection.find_one({"_id": entry_id})
        if doc:
            return LedgerEntry(**doc)
        return None

    async def list_for_person(self, person_id: int) -> List[LedgerEntry]:
        """Full history for a person, oldest transaction first."""
        docs = await self.collection.find(
            {"person_id": person_id}
        ).sort([("date", 1), ("_id", 1)]).to_list(None)
        return [LedgerEntry(**doc) for doc in docs]

    async def list_for_people(self, person_ids: Iterable[int]) -> List[LedgerEntry]:
        docs = await self.collection.find(
            {"person_id": {"$in": list(person_ids)}}
        ).sort([("date", 1), ("_id", 1)]).to_list(None)
        return [LedgerEntry(**doc) for doc in docs]

    async def list_awaiting_decision(self, user_id: str) -> List[LedgerEntry]:
        """Pending entries on the user's book that someone else recorded."""
        docs = await self.collection.find({
            "owner_id": user_id,
            "status": LedgerStatus.PENDING.value,
            "created_by": {"$ne": user_id}
        }).sort("_id", 1).to_list(None)
        return [LedgerEntry(**doc) for doc in docs]

    async def transition_status(
        self,
        entry_ids: List[int],
        current: LedgerStatus,
        target: LedgerStatus
    ) -> int:
        """
        Move entries from current to target status.

        Only rows still in ``current`` are touched. Returns how many moved.
        """
        result = await self.collection.update_many(
            {"_id": {"$in": entry_ids}, "status": current.value},
            {"$set": {
                "status": target.value,
                "updated_at": datetime.now(timezone.utc)
            }}
        )
        return result.modified_count
