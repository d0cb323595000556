import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ReturnDocument

from app.core.config import settings

logger = logging.getLogger(__name__)


class MongoDatabase:
    """MongoDB connection manager."""

    client: AsyncIOMotorClient = None
    db: AsyncIOMotorDatabase = None

mongodb = MongoDatabase()

async def connect_to_mongo():
    """Connect to MongoDB."""
    mongodb.client = AsyncIOMotorClient(settings.MONGODB_URI)
    mongodb.db = mongodb.client[settings.MONGODB_DB]

    await create_indexes()
    logger.info("Connected to MongoDB: %s", settings.MONGODB_DB)

async def disconnect_from_mongo():
    """Disconnect from MongoDB."""
    if mongodb.client is not None:
        mongodb.client.close()
    logger.info("Disconnected from MongoDB")

async def create_indexes():
    """Create database indexes."""
    # User email unique index
    await mongodb.db["users"].create_index("email", unique=True)

    # People
    await mongodb.db["people"].create_index([("owner_id", 1), ("is_deleted", 1)])
    await mongodb.db["people"].create_index([("owner_id", 1), ("linked_user_id", 1)])

    # Ledger entries
    await mongodb.db["ledger_entries"].create_index([("person_id", 1), ("date", 1)])
    await mongodb.db["ledger_entries"].create_index([("owner_id", 1), ("status", 1)])

    # Travel groups
    await mongodb.db["groups"].create_index("owner_id")

async def next_sequence(db: AsyncIOMotorDatabase, name: str, count: int = 1) -> int:
    """
    Reserve ``count`` consecutive ids from a named counter.

    Returns the first id of the reserved block. Ids start at 1.
    """
    doc = await db["counters"].find_one_and_update(
        {"_id": name},
        {"$inc": {"seq": count}},
        upsert=True,
        return_document=ReturnDocument.AFTER
    )
    return doc["seq"] - count + 1

def get_db() -> AsyncIOMotorDatabase:
    """Get database instance."""
    return mongodb.db
