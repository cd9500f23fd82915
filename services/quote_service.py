"""
Quote Catalog Service

Read-mostly access to the quotes collection, plus the one-time sample seed.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from config.logging_utils import log_success
from models.quote import Quote
from repositories.base import DuplicateKeyError, Repository
from services.errors import NotFoundError

logger = logging.getLogger(__name__)

MAX_QUOTE_ID = 2**63 - 1


SAMPLE_QUOTES = [
    {
        "id": 1,
        "text": "The only way to do great work is to love what you do.",
        "author": "Steve Jobs",
        "category": "passion",
    },
    {
        "id": 2,
        "text": "Success is not final, failure is not fatal: it is the courage to continue that counts.",
        "author": "Winston Churchill",
        "category": "perseverance",
    },
    {
        "id": 3,
        "text": "The future belongs to those who believe in the beauty of their dreams.",
        "author": "Eleanor Roosevelt",
        "category": "dreams",
    },
    {
        "id": 4,
        "text": "Don't watch the clock; do what it does. Keep going.",
        "author": "Sam Levenson",
        "category": "perseverance",
    },
    {
        "id": 5,
        "text": "The only limit to our realization of tomorrow is our doubts of today.",
        "author": "Franklin D. Roosevelt",
        "category": "optimism",
    },
]


def parse_quote_id(value) -> Optional[int]:
    """Return the quote id as a positive int, or None if it is not one.

    Ids must fit a signed 64-bit integer so they can be stored in MongoDB.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not (value.isascii() and value.isdecimal()) or len(value) > 19:
            return None
        value = int(value)
    if not isinstance(value, int):
        return None
    return value if 0 < value <= MAX_QUOTE_ID else None


class QuoteCatalog:
    """Lookup operations over the quotes collection."""

    def __init__(self, quotes: Repository):
        self.quotes = quotes

    async def ensure_indexes(self) -> None:
        """Create indexes for the quotes collection."""
        await self.quotes.create_index([("id", 1)], unique=True)
        await self.quotes.create_index([("category", 1)])

    async def seed_if_empty(self) -> int:
        """
        Insert the sample quotes if the catalog is empty.

        Returns:
            Number of quotes inserted (0 when the catalog already had data).
        """
        if await self.quotes.count() > 0:
            return 0

        now = datetime.now(timezone.utc)
        documents = [
            {**quote, "created_at": now, "updated_at": now}
            for quote in SAMPLE_QUOTES
        ]
        try:
            await self.quotes.insert_many(documents)
        except DuplicateKeyError:
            # Another process seeded the catalog between the count and the insert.
            logger.info("Quote catalog was seeded concurrently; skipping")
            return 0

        log_success(f"Seeded {len(documents)} sample quotes", prefix="QUOTES")
        return len(documents)

    async def all(self) -> list[Quote]:
        """Get every quote ordered by id."""
        documents = await self.quotes.find({}, sort=[("id", 1)])
        return [Quote.from_document(d) for d in documents]

    async def by_id(self, quote_id) -> Quote:
        """Get a quote by its numeric id."""
        parsed = parse_quote_id(quote_id)
        document = await self.quotes.find_one({"id": parsed}) if parsed else None
        if not document:
            raise NotFoundError("Quote not found")
        return Quote.from_document(document)

    async def by_ids(self, quote_ids: list[int]) -> dict[int, Quote]:
        """Get the quotes whose ids are listed, keyed by id."""
        if not quote_ids:
            return {}
        documents = await self.quotes.find({"id": {"$in": list(quote_ids)}})
        return {d["id"]: Quote.from_document(d) for d in documents}

    async def exists(self, quote_id: int) -> bool:
        return await self.quotes.count({"id": quote_id}) > 0

    async def by_category(self, category: str) -> list[Quote]:
        """Get quotes in a category, matched case-insensitively."""
        normalized = (category or "").strip().lower()
        documents = await self.quotes.find({"category": normalized}, sort=[("id", 1)])
        if not documents:
            raise NotFoundError("No quotes found for this category")
        return [Quote.from_document(d) for d in documents]

    async def random(self) -> Quote:
        """Get a random quote."""
        documents = await self.quotes.sample(1)
        if not documents:
            raise NotFoundError("No quotes found in database")
        return Quote.from_document(documents[0])

    async def count(self) -> int:
        return await self.quotes.count()
