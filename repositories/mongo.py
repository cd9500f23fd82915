"""MongoDB repository backed by a Motor collection."""

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import BulkWriteError
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from repositories.base import Document, DuplicateKeyError, Repository, SortSpec

if TYPE_CHECKING:
    from config.database import Database


DUPLICATE_KEY_CODE = 11000


class MongoRepository(Repository):
    """Repository over a single MongoDB collection.

    The collection is resolved on every call so a repository can be handed
    out before the database connects.
    """

    def __init__(self, database: "Database", name: str, use_transactions: bool = False):
        self.database = database
        self.name = name
        self._use_transactions = use_transactions

    @property
    def collection(self) -> AsyncIOMotorCollection:
        if self.database.db is None:
            raise RuntimeError("Database is not connected")
        return self.database.get_collection(self.name)

    async def find_by_id(self, document_id: Any) -> Optional[Document]:
        return await self.collection.find_one({"_id": document_id})

    async def find_one(self, filter: Document) -> Optional[Document]:
        return await self.collection.find_one(filter)

    async def find(
        self,
        filter: Optional[Document] = None,
        sort: Optional[SortSpec] = None,
    ) -> list[Document]:
        cursor = self.collection.find(filter or {})
        if sort:
            cursor = cursor.sort(sort)
        return await cursor.to_list(length=None)

    async def insert(self, document: Document, session=None) -> Any:
        try:
            result = await self.collection.insert_one(document, session=session)
        except MongoDuplicateKeyError as e:
            raise DuplicateKeyError(str(e)) from e
        return result.inserted_id

    async def insert_many(self, documents: list[Document]) -> list[Any]:
        try:
            result = await self.collection.insert_many(documents)
        except BulkWriteError as e:
            write_errors = e.details.get("writeErrors", [])
            if any(err.get("code") == DUPLICATE_KEY_CODE for err in write_errors):
                raise DuplicateKeyError(str(e)) from e
            raise
        return list(result.inserted_ids)

    async def update(
        self,
        filter: Document,
        values: Document,
        increment: Optional[dict[str, int]] = None,
        session=None,
    ) -> int:
        update: Document = {"$set": values}
        if increment:
            update["$inc"] = increment
        try:
            result = await self.collection.update_one(filter, update, session=session)
        except MongoDuplicateKeyError as e:
            raise DuplicateKeyError(str(e)) from e
        return result.matched_count

    async def delete(self, filter: Document, session=None) -> int:
        result = await self.collection.delete_one(filter, session=session)
        return result.deleted_count

    async def delete_many(self, filter: Document, session=None) -> int:
        result = await self.collection.delete_many(filter, session=session)
        return result.deleted_count

    async def count(self, filter: Optional[Document] = None) -> int:
        return await self.collection.count_documents(filter or {})

    async def sample(self, size: int) -> list[Document]:
        cursor = self.collection.aggregate([{"$sample": {"size": size}}])
        return await cursor.to_list(length=None)

    async def create_index(self, keys: SortSpec, unique: bool = False) -> None:
        await self.collection.create_index(keys, unique=unique)

    @asynccontextmanager
    async def transaction(self):
        """Run the enclosed writes in a MongoDB transaction (replica sets only)."""
        if not self._use_transactions:
            yield None
            return

        async with await self.database.client.start_session() as session:
            async with session.start_transaction():
                yield session
