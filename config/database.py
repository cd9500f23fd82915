"""Database configuration for async MongoDB connection using Motor."""

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from typing import Optional

from config.settings import Settings
from repositories.base import DatabaseBackend
from repositories.mongo import MongoRepository


class Database(DatabaseBackend):
    """MongoDB database connection manager."""

    backend_name = "mongodb"

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    def __init__(self, settings: Settings):
        self.settings = settings
        self._repositories: dict[str, MongoRepository] = {}

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        self.client = AsyncIOMotorClient(
            self.settings.MONGODB_URL,
            maxPoolSize=10,
            minPoolSize=1
        )
        self.db = self.client[self.settings.DATABASE_NAME]

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
        self.client = None
        self.db = None

    async def health_check(self) -> bool:
        """Check if database connection is healthy."""
        if self.client is None:
            return False
        try:
            await self.client.admin.command("ping")
            return True
        except Exception:
            return False

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get database instance."""
        return self.db

    def get_collection(self, collection_name: str):
        """Get a specific collection from the database."""
        return self.db[collection_name]

    def repository(self, name: str) -> MongoRepository:
        """Get the repository for a collection."""
        if name not in self._repositories:
            self._repositories[name] = MongoRepository(
                self,
                name,
                use_transactions=self.settings.MONGODB_TRANSACTIONS,
            )
        return self._repositories[name]
