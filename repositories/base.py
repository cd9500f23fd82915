"""
Repository Interface

Narrow storage contract used by the services. Filters are Mongo-style
equality documents; the `$ne` and `$in` operators are the only operators
every backend must understand.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, Optional


Document = dict[str, Any]
SortSpec = list[tuple[str, int]]


class RepositoryError(Exception):
    """Base exception for storage backend errors."""
    pass


class DuplicateKeyError(RepositoryError):
    """Raised when a write violates a unique index."""
    pass


class Repository(ABC):
    """Abstract collection of documents with unique-index support."""

    name: str

    @abstractmethod
    async def find_by_id(self, document_id: Any) -> Optional[Document]:
        """Return the document whose `_id` equals `document_id`, if any."""

    @abstractmethod
    async def find_one(self, filter: Document) -> Optional[Document]:
        """Return the first document matching `filter`, if any."""

    @abstractmethod
    async def find(
        self,
        filter: Optional[Document] = None,
        sort: Optional[SortSpec] = None,
    ) -> list[Document]:
        """Return every document matching `filter`, ordered by `sort`."""

    @abstractmethod
    async def insert(self, document: Document, session=None) -> Any:
        """
        Insert one document and return its `_id`.

        Raises:
            DuplicateKeyError: If the document violates a unique index.
        """

    @abstractmethod
    async def insert_many(self, documents: list[Document]) -> list[Any]:
        """
        Insert several documents and return their ids.

        Raises:
            DuplicateKeyError: If any document violates a unique index.
        """

    @abstractmethod
    async def update(
        self,
        filter: Document,
        values: Document,
        increment: Optional[dict[str, int]] = None,
        session=None,
    ) -> int:
        """
        Set `values` (and add `increment`) on the first matching document.

        Returns:
            Number of matched documents (0 or 1).

        Raises:
            DuplicateKeyError: If the update violates a unique index.
        """

    @abstractmethod
    async def delete(self, filter: Document, session=None) -> int:
        """Delete the first matching document and return the deleted count."""

    @abstractmethod
    async def delete_many(self, filter: Document, session=None) -> int:
        """Delete every matching document and return the deleted count."""

    @abstractmethod
    async def count(self, filter: Optional[Document] = None) -> int:
        """Count documents matching `filter`."""

    @abstractmethod
    async def sample(self, size: int) -> list[Document]:
        """Return up to `size` documents chosen at random."""

    @abstractmethod
    async def create_index(self, keys: SortSpec, unique: bool = False) -> None:
        """Create an index over `keys` (field, direction) pairs."""

    @asynccontextmanager
    async def transaction(self):
        """
        Scope several writes in one transaction where the backend supports it.

        Yields a session object to pass to write methods, or None when the
        writes run independently. Callers must tolerate the None case: a crash
        between two writes then leaves the first one applied.
        """
        yield None


class DatabaseBackend(ABC):
    """Connection manager that hands out repositories by collection name."""

    backend_name: str

    @abstractmethod
    async def connect(self) -> None:
        """Establish the connection."""

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the connection."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the database is reachable."""

    @abstractmethod
    def repository(self, name: str) -> Repository:
        """Get the repository for a collection."""
