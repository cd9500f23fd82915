"""Favorites ledger: per-user bookmarks of catalog quotes."""

from datetime import datetime, timezone

from bson import ObjectId

from config.logging_utils import log_debug
from models.quote import Favorite
from repositories.base import DuplicateKeyError, Repository
from services.errors import ConflictError, NotFoundError, ValidationError
from services.quote_service import QuoteCatalog, parse_quote_id
from services.user_service import parse_object_id


class FavoritesService:
    """Add, remove, list, and check (user, quote) favorite pairs."""

    def __init__(self, favorites: Repository, catalog: QuoteCatalog):
        self.favorites = favorites
        self.catalog = catalog

    async def ensure_indexes(self) -> None:
        """Create the unique pair index and the per-user listing index."""
        await self.favorites.create_index([("user_id", 1), ("quote_id", 1)], unique=True)
        await self.favorites.create_index([("user_id", 1), ("added_at", -1)])

    @staticmethod
    def _parse_ids(user_id: str, quote_id) -> tuple[ObjectId, int]:
        oid = parse_object_id(user_id, "user")
        parsed = parse_quote_id(quote_id)
        if parsed is None:
            raise ValidationError("Invalid quote ID")
        return oid, parsed

    async def add(self, user_id: str, quote_id) -> None:
        """
        Add a quote to a user's favorites.

        Duplicates are caught by the unique (user_id, quote_id) index, not by
        a lookup beforehand.
        """
        oid, parsed = self._parse_ids(user_id, quote_id)

        if not await self.catalog.exists(parsed):
            raise NotFoundError("Quote not found")

        try:
            await self.favorites.insert({
                "user_id": oid,
                "quote_id": parsed,
                "added_at": datetime.now(timezone.utc),
            })
        except DuplicateKeyError as e:
            raise ConflictError("Quote is already in favorites") from e

        log_debug(f"user_id={oid} added quote_id={parsed}", prefix="FAVORITES")

    async def remove(self, user_id: str, quote_id) -> None:
        """Remove a quote from a user's favorites."""
        oid, parsed = self._parse_ids(user_id, quote_id)

        deleted = await self.favorites.delete({"user_id": oid, "quote_id": parsed})
        if deleted == 0:
            raise NotFoundError("Quote not found in favorites")

        log_debug(f"user_id={oid} removed quote_id={parsed}", prefix="FAVORITES")

    async def list(self, user_id: str) -> list[Favorite]:
        """Get a user's favorites, newest first, with their quotes attached."""
        oid = parse_object_id(user_id, "user")
        documents = await self.favorites.find(
            {"user_id": oid},
            sort=[("added_at", -1), ("_id", -1)],
        )
        quotes = await self.catalog.by_ids([d["quote_id"] for d in documents])
        return [
            Favorite(
                quote_id=d["quote_id"],
                added_at=d["added_at"],
                quote=quotes.get(d["quote_id"]),
            )
            for d in documents
        ]

    async def exists(self, user_id: str, quote_id) -> bool:
        """Check if a quote is in a user's favorites; malformed ids are never favorites."""
        try:
            oid, parsed = self._parse_ids(user_id, quote_id)
        except ValidationError:
            return False

        return await self.favorites.count({"user_id": oid, "quote_id": parsed}) > 0
