"""Account service for registration, login, and profile management."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import bcrypt
from bson import ObjectId
from email_validator import EmailNotValidError, validate_email

from config.logging_utils import log_debug
from models.user import UserResponse
from repositories.base import DuplicateKeyError, Repository
from services.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72
INVALID_CREDENTIALS = "Invalid email or password"


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password using bcrypt."""
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    password_bytes = plain_password.encode('utf-8')
    hashed_bytes = hashed_password.encode('utf-8')
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def parse_object_id(value: str, label: str) -> ObjectId:
    """Convert a string id to an ObjectId, failing with a ValidationError."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        raise ValidationError(f"Invalid {label} ID")
    return ObjectId(value)


def normalize_email(email: str) -> str:
    """Trim, validate, and lowercase an email address."""
    email = email.strip()
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationError("Invalid email format") from e
    return email.lower()


class UserService:
    """Registration, login, and profile operations over the users collection."""

    def __init__(self, users: Repository, favorites: Repository, bcrypt_rounds: int = 12):
        self.users = users
        self.favorites = favorites
        self.bcrypt_rounds = bcrypt_rounds

    async def ensure_indexes(self) -> None:
        """Create the unique index on email."""
        await self.users.create_index([("email", 1)], unique=True)

    async def register(self, email: str, password: str, name: str) -> UserResponse:
        """Create a new user account."""
        if not email or not password or not name or not name.strip():
            raise ValidationError("Email, password, and name are required")

        email = normalize_email(email)

        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
        if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes long"
            )

        if await self.users.find_one({"email": email}):
            raise ConflictError("User with this email already exists")

        password_hash = await asyncio.to_thread(hash_password, password, self.bcrypt_rounds)

        now = datetime.now(timezone.utc)
        user_doc = {
            "email": email,
            "password_hash": password_hash,
            "name": name.strip(),
            "token_version": 0,
            "created_at": now,
            "updated_at": now,
        }

        try:
            await self.users.insert(user_doc)
        except DuplicateKeyError as e:
            # Lost a race with a concurrent registration for the same email.
            raise ConflictError("User with this email already exists") from e

        log_debug(f"Registered user_id={user_doc['_id']}", prefix="AUTH")
        return UserResponse.from_document(user_doc)

    async def login(self, email: str, password: str) -> UserResponse:
        """
        Authenticate a user with email and password.

        Unknown emails and wrong passwords fail with the same error.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.users.find_one({"email": email.strip().lower()})
        if not user:
            raise InvalidCredentialsError(INVALID_CREDENTIALS)

        valid = await asyncio.to_thread(verify_password, password, user["password_hash"])
        if not valid:
            raise InvalidCredentialsError(INVALID_CREDENTIALS)

        return UserResponse.from_document(user)

    async def get_by_id(self, user_id: str) -> UserResponse:
        """Get a user by ID."""
        oid = parse_object_id(user_id, "user")
        user = await self.users.find_by_id(oid)
        if not user:
            raise NotFoundError("User not found")
        return UserResponse.from_document(user)

    async def update(
        self,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserResponse:
        """
        Update a user's name and/or email.

        Changing the email bumps the user's token version, which invalidates
        every token issued for the old address.
        """
        oid = parse_object_id(user_id, "user")
        current = await self.users.find_by_id(oid)
        if not current:
            raise NotFoundError("User not found")

        update_fields = {"updated_at": datetime.now(timezone.utc)}
        increment = None

        if name is not None:
            if not name.strip():
                raise ValidationError("Name cannot be empty")
            update_fields["name"] = name.strip()

        if email is not None:
            email = normalize_email(email)
            if email != current["email"]:
                taken = await self.users.find_one({"email": email, "_id": {"$ne": oid}})
                if taken:
                    raise ConflictError("Email is already taken")
                update_fields["email"] = email
                increment = {"token_version": 1}

        try:
            matched = await self.users.update({"_id": oid}, update_fields, increment=increment)
        except DuplicateKeyError as e:
            raise ConflictError("Email is already taken") from e

        if matched == 0:
            raise NotFoundError("User not found")

        return await self.get_by_id(oid)

    async def delete(self, user_id: str) -> None:
        """
        Delete a user and all of the user's favorites.

        Favorites go first so none outlive the account. Without a
        transaction-capable backend the two deletes are independent, and a
        crash between them leaves the user with no favorites but still
        present; retrying the delete completes it.
        """
        oid = parse_object_id(user_id, "user")
        if not await self.users.find_by_id(oid):
            raise NotFoundError("User not found")

        async with self.users.transaction() as session:
            removed = await self.favorites.delete_many({"user_id": oid}, session=session)
            deleted = await self.users.delete({"_id": oid}, session=session)

        if deleted == 0:
            raise NotFoundError("User not found")

        logger.info("Deleted user %s and %d favorite(s)", oid, removed)
