import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from shopcart.core.config import settings

logger = logging.getLogger(__name__)

# Global MongoDB client
_client: AsyncIOMotorClient = None
_database: AsyncIOMotorDatabase = None


async def connect_to_mongo():
    """Connect to MongoDB."""
    global _client, _database
    _client = AsyncIOMotorClient(settings.MONGODB_URI)
    _database = _client[settings.MONGODB_DB_NAME]
    logger.info(f"Connected to MongoDB: {settings.MONGODB_DB_NAME}")


async def close_mongo_connection():
    """Close MongoDB connection."""
    global _client
    if _client:
        _client.close()
        logger.info("Closed MongoDB connection")


async def ensure_indexes(db: AsyncIOMotorDatabase):
    """
    Create the indexes the services rely on.
    
    - carts.user_email must be unique: one cart per user, and lazy creation
      relies on the duplicate key error to detect a concurrent insert.
    - coupon_redemptions (user_email, coupon_code) must be unique: this is
      the atomic check-and-set for one-time coupons.
    - orders.cart_id must be unique: a cart converts into at most one order.
    """
    await db.carts.create_index([("user_email", ASCENDING)], unique=True)
    await db.coupon_redemptions.create_index(
        [("user_email", ASCENDING), ("coupon_code", ASCENDING)],
        unique=True
    )
    await db.orders.create_index([("user_email", ASCENDING), ("created_at", DESCENDING)])
    await db.orders.create_index(
        [("cart_id", ASCENDING)],
        unique=True,
        partialFilterExpression={"cart_id": {"$type": "string"}}
    )
    logger.info("MongoDB indexes ensured")


def get_database() -> AsyncIOMotorDatabase:
    """Get MongoDB database instance."""
    return _database
