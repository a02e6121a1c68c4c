"""
Document store connection management
"""

import logging
from pymongo import AsyncMongoClient

from config import settings
from database.user_store import UserStore, MongoUserStore
from database.memory_store import InMemoryUserStore

logger = logging.getLogger(__name__)


async def init_database() -> UserStore:
    """Build the configured user store and verify it is reachable"""
    if settings.STORE_BACKEND == "memory":
        store = InMemoryUserStore()
        logger.info("Using in-memory user store")
    else:
        if not settings.MONGO_URI:
            raise ValueError("MONGO_URI environment variable is required")

        client = AsyncMongoClient(
            settings.MONGO_URI,
            serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS
        )
        collection = client[settings.MONGO_DB_NAME][settings.USERS_COLLECTION]
        store = MongoUserStore(collection, client=client)

    # Test connection
    try:
        await store.ping()
    except Exception:
        await store.close()
        raise

    logger.info("Database initialized successfully")
    return store


async def close_database(store: UserStore):
    """Release the store's connections"""
    if store:
        await store.close()
    logger.info("Database connections closed")
