"""Resolution of bearer tokens into authenticated identities."""

import logging
from typing import Optional

from models.user import TokenData
from services.errors import (
    InvalidTokenError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from services.token_service import TokenService
from services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthGateway:
    """
    Verifies bearer tokens for protected and optionally-authenticated operations.

    A token is accepted only while its user still exists and its version
    matches the user's current token version. Logging out is client-side.
    """

    def __init__(self, tokens: TokenService, users: UserService):
        self.tokens = tokens
        self.users = users

    async def authenticate(self, token: Optional[str]) -> TokenData:
        """
        Resolve a mandatory bearer token.

        Raises:
            UnauthenticatedError: If no token was presented.
            InvalidTokenError: If the token fails verification or is stale.
        """
        if not token:
            raise UnauthenticatedError("Access token required")

        identity = self.tokens.verify(token)

        try:
            user = await self.users.get_by_id(identity.user_id)
        except (ValidationError, NotFoundError) as e:
            raise InvalidTokenError("Invalid or expired token") from e

        if user.token_version != identity.version:
            logger.info("Rejected stale token for user %s", identity.user_id)
            raise InvalidTokenError("Invalid or expired token")

        return identity

    async def authenticate_optional(self, token: Optional[str]) -> Optional[TokenData]:
        """Resolve a bearer token if one was presented; never raises for bad tokens."""
        if not token:
            return None
        try:
            return await self.authenticate(token)
        except InvalidTokenError:
            return None
