"""Explicit construction of the database backend and services."""

import logging
from dataclasses import dataclass

from config.database import Database
from config.logging_utils import configure_debug_logging, log_step, log_success
from config.settings import Settings
from repositories.base import DatabaseBackend
from repositories.memory import InMemoryDatabase
from services.auth_gateway import AuthGateway
from services.favorites_service import FavoritesService
from services.quote_service import QuoteCatalog
from services.token_service import TokenService
from services.user_service import UserService

logger = logging.getLogger(__name__)


USERS_COLLECTION = "users"
FAVORITES_COLLECTION = "favorites"
QUOTES_COLLECTION = "quotes"


def create_database(settings: Settings) -> DatabaseBackend:
    """Create the database backend selected by DATABASE_BACKEND."""
    if settings.DATABASE_BACKEND == "mongodb":
        return Database(settings)
    if settings.DATABASE_BACKEND == "memory":
        return InMemoryDatabase()
    raise ValueError(f"Unsupported database type: {settings.DATABASE_BACKEND}")


@dataclass
class Services:
    """Everything the HTTP layer needs, wired once at startup."""

    settings: Settings
    database: DatabaseBackend
    tokens: TokenService
    users: UserService
    favorites: FavoritesService
    quotes: QuoteCatalog
    auth: AuthGateway

    async def startup(self) -> None:
        """Connect, create indexes, and seed the quote catalog."""
        log_step("Connecting to database", 1, 3)
        await self.database.connect()
        logger.info("Connected to %s database: %s", self.database.backend_name, self.settings.DATABASE_NAME)

        log_step("Creating indexes", 2, 3)
        await self.users.ensure_indexes()
        await self.favorites.ensure_indexes()
        await self.quotes.ensure_indexes()

        log_step("Seeding quote catalog", 3, 3)
        await self.quotes.seed_if_empty()
        log_success("Database service ready")

    async def shutdown(self) -> None:
        await self.database.disconnect()
        logger.info("Disconnected from %s database", self.database.backend_name)

    async def collection_counts(self) -> dict[str, int]:
        """Document counts per collection."""
        return {
            name: await self.database.repository(name).count()
            for name in (QUOTES_COLLECTION, USERS_COLLECTION, FAVORITES_COLLECTION)
        }


def build_services(settings: Settings) -> Services:
    """Build the service graph for the given settings."""
    configure_debug_logging(settings)
    database = create_database(settings)

    users_repo = database.repository(USERS_COLLECTION)
    favorites_repo = database.repository(FAVORITES_COLLECTION)
    quotes_repo = database.repository(QUOTES_COLLECTION)

    tokens = TokenService(settings)
    users = UserService(users_repo, favorites_repo, bcrypt_rounds=settings.BCRYPT_ROUNDS)
    quotes = QuoteCatalog(quotes_repo)
    favorites = FavoritesService(favorites_repo, quotes)

    return Services(
        settings=settings,
        database=database,
        tokens=tokens,
        users=users,
        favorites=favorites,
        quotes=quotes,
        auth=AuthGateway(tokens, users),
    )
