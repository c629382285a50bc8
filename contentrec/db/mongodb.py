from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING, IndexModel
from contentrec.core.config import settings
import logging

logger = logging.getLogger(__name__)

ACTIVITY_INDEXES = [
    IndexModel([("user", ASCENDING), ("item", ASCENDING)], unique=True, name="user_item_unique"),
    IndexModel([("user", ASCENDING), ("last_visited_at", DESCENDING)], name="user_recent"),
    IndexModel([("created_at", DESCENDING)], name="created_at"),
    IndexModel([("last_visited_at", DESCENDING)], name="last_visited_at"),
]


class MongoDB:
    client: AsyncIOMotorClient = None

    def __init__(self):
        self.client = None
        self.db = None

    async def connect(self):
        try:
            self.client = AsyncIOMotorClient(
                settings.MONGODB_URI,
                maxPoolSize=settings.MONGODB_POOL_SIZE,
                connectTimeoutMS=settings.MONGODB_CONNECT_TIMEOUT_MS,
                socketTimeoutMS=settings.MONGODB_SOCKET_TIMEOUT_MS,
                serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
                retryWrites=True,
                retryReads=True,
                tz_aware=True,
                appname="contentrec",
            )
            self.db = self.client[settings.MONGODB_DB_NAME]
            logger.info(f"Connected to MongoDB database {settings.MONGODB_DB_NAME}.")
        except Exception as e:
            logger.error(f"Could not connect to MongoDB: {e}")
            raise

    async def ensure_indexes(self):
        """Create the activity indexes; the unique (user, item) index backs the upsert."""
        collection = self.get_db()[settings.ACTIVITY_COLLECTION]
        names = await collection.create_indexes(ACTIVITY_INDEXES)
        logger.info(f"Ensured activity indexes: {', '.join(names)}")

    async def ping(self) -> bool:
        await self.get_db().command("ping")
        return True

    async def close(self):
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("MongoDB connection closed.")

    def get_db(self):
        if self.db is None:
            raise RuntimeError("Database not initialized")
        return self.db


mongodb = MongoDB()
