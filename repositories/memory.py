"""
In-Memory Repository

Dict-backed implementation of the repository interface. Each operation runs
to completion without awaiting, so concurrent requests on one event loop see
the same uniqueness guarantees a database index gives.
"""

import copy
import random
from typing import Any, Optional

from bson import ObjectId

from repositories.base import (
    DatabaseBackend,
    Document,
    DuplicateKeyError,
    Repository,
    SortSpec,
)


def _matches(document: Document, filter: Optional[Document]) -> bool:
    """Evaluate a Mongo-style filter against one document."""
    for key, condition in (filter or {}).items():
        value = document.get(key)
        if isinstance(condition, dict) and any(k.startswith("$") for k in condition):
            for operator, operand in condition.items():
                if operator == "$ne":
                    if value == operand:
                        return False
                elif operator == "$in":
                    if value not in operand:
                        return False
                else:
                    raise ValueError(f"Unsupported filter operator: {operator}")
        elif value != condition:
            return False
    return True


def _sort_key(value: Any):
    # Missing values sort before present ones, as in MongoDB.
    return (value is not None, value)


class InMemoryRepository(Repository):
    """Repository holding documents in process memory."""

    def __init__(self, name: str):
        self.name = name
        self._documents: dict[Any, Document] = {}
        self._unique_indexes: list[tuple[str, ...]] = []

    def _check_unique(self, candidate: Document, ignore_id: Any = None) -> None:
        for fields in self._unique_indexes:
            key = tuple(candidate.get(f) for f in fields)
            for doc_id, existing in self._documents.items():
                if doc_id == ignore_id:
                    continue
                if tuple(existing.get(f) for f in fields) == key:
                    raise DuplicateKeyError(
                        f"E11000 duplicate key error collection: {self.name} "
                        f"index: {'_'.join(fields)} dup key: {key}"
                    )

    def _first(self, filter: Document) -> Optional[Document]:
        for document in self._documents.values():
            if _matches(document, filter):
                return document
        return None

    async def find_by_id(self, document_id: Any) -> Optional[Document]:
        document = self._documents.get(document_id)
        return copy.deepcopy(document) if document is not None else None

    async def find_one(self, filter: Document) -> Optional[Document]:
        document = self._first(filter)
        return copy.deepcopy(document) if document is not None else None

    async def find(
        self,
        filter: Optional[Document] = None,
        sort: Optional[SortSpec] = None,
    ) -> list[Document]:
        documents = [d for d in self._documents.values() if _matches(d, filter)]
        for field, direction in reversed(sort or []):
            documents.sort(key=lambda d: _sort_key(d.get(field)), reverse=direction < 0)
        return copy.deepcopy(documents)

    async def insert(self, document: Document, session=None) -> Any:
        stored = copy.deepcopy(document)
        stored.setdefault("_id", ObjectId())
        if stored["_id"] in self._documents:
            raise DuplicateKeyError(
                f"E11000 duplicate key error collection: {self.name} index: _id_"
            )
        self._check_unique(stored)
        self._documents[stored["_id"]] = stored
        document["_id"] = stored["_id"]
        return stored["_id"]

    async def insert_many(self, documents: list[Document]) -> list[Any]:
        inserted = []
        for document in documents:
            inserted.append(await self.insert(document))
        return inserted

    async def update(
        self,
        filter: Document,
        values: Document,
        increment: Optional[dict[str, int]] = None,
        session=None,
    ) -> int:
        document = self._first(filter)
        if document is None:
            return 0

        updated = copy.deepcopy(document)
        updated.update(copy.deepcopy(values))
        for field, amount in (increment or {}).items():
            updated[field] = updated.get(field, 0) + amount

        self._check_unique(updated, ignore_id=document["_id"])
        self._documents[document["_id"]] = updated
        return 1

    async def delete(self, filter: Document, session=None) -> int:
        document = self._first(filter)
        if document is None:
            return 0
        del self._documents[document["_id"]]
        return 1

    async def delete_many(self, filter: Document, session=None) -> int:
        doomed = [doc_id for doc_id, d in self._documents.items() if _matches(d, filter)]
        for doc_id in doomed:
            del self._documents[doc_id]
        return len(doomed)

    async def count(self, filter: Optional[Document] = None) -> int:
        return sum(1 for d in self._documents.values() if _matches(d, filter))

    async def sample(self, size: int) -> list[Document]:
        documents = list(self._documents.values())
        picked = random.sample(documents, min(size, len(documents)))
        return copy.deepcopy(picked)

    async def create_index(self, keys: SortSpec, unique: bool = False) -> None:
        if not unique:
            return
        fields = tuple(field for field, _ in keys)
        if fields not in self._unique_indexes:
            self._unique_indexes.append(fields)


class InMemoryDatabase(DatabaseBackend):
    """Process-local stand-in for the MongoDB connection manager."""

    backend_name = "memory"

    def __init__(self):
        self._repositories: dict[str, InMemoryRepository] = {}
        self._connected = False

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def health_check(self) -> bool:
        return self._connected

    def repository(self, name: str) -> InMemoryRepository:
        if name not in self._repositories:
            self._repositories[name] = InMemoryRepository(name)
        return self._repositories[name]
