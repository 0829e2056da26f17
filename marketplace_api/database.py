"""
Database module for the Marketplace API
Handles MongoDB client creation, collection names and index setup
"""
import logging
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING

from marketplace_api.config import MONGO_URI, DB_NAME, MONGO_TIMEOUT_MS

logger = logging.getLogger(__name__)

# Collections
SERVICES_COLLECTION = "services"
BOOKINGS_COLLECTION = "bookings"


def create_client(uri: str = None, timeout_ms: int = None) -> AsyncIOMotorClient:
    """
    Create the long-lived MongoDB client.

    The client owns a connection pool and is shared by every request for the
    lifetime of the process. Timeouts keep a slow store from holding requests
    open indefinitely.
    """
    timeout_ms = timeout_ms or MONGO_TIMEOUT_MS
    return AsyncIOMotorClient(
        uri or MONGO_URI,
        serverSelectionTimeoutMS=timeout_ms,
        connectTimeoutMS=timeout_ms,
        socketTimeoutMS=timeout_ms,
    )


def get_database(client: AsyncIOMotorClient, name: str = None):
    return client[name or DB_NAME]


async def setup_indexes(db):
    """
    Set up indexes for marketplace collections.

    The unique compound index on bookings enforces one booking per user per
    service at the storage layer.
    """
    await db[BOOKINGS_COLLECTION].create_index(
        [("serviceId", ASCENDING), ("userEmail", ASCENDING)],
        unique=True,
        name="unique_service_user",
    )
    logger.info("Created unique index on bookings.(serviceId, userEmail)")

    await db[BOOKINGS_COLLECTION].create_index("userEmail")
    await db[SERVICES_COLLECTION].create_index("userEmail")
    logger.info("Marketplace indexes setup complete")
