"""Token service for issuing and verifying signed JWT access tokens."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from config.settings import Settings
from models.user import TokenData
from services.errors import InvalidTokenError

logger = logging.getLogger(__name__)


class TokenService:
    """Issues and verifies HMAC-signed identity tokens."""

    def __init__(self, settings: Settings):
        self.secret = settings.JWT_SECRET
        self.algorithm = settings.JWT_ALGORITHM
        self.expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

        if settings.uses_default_secret:
            logger.warning(
                "JWT_SECRET is not set; tokens are signed with the built-in default secret. "
                "Set JWT_SECRET before deploying."
            )

    def issue(self, user_id: str, email: str, version: int = 0) -> str:
        """Create a JWT access token for a user."""
        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "ver": version,
            "iat": now,
            "exp": now + self.expires_delta,
        }
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenData:
        """
        Decode and validate a JWT token.

        Raises:
            InvalidTokenError: If the signature, payload, or expiry is invalid.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug("Token rejected: %s", e)
            raise InvalidTokenError("Invalid or expired token") from e

        user_id = payload.get("sub")
        version = payload.get("ver", 0)
        if not user_id or not isinstance(version, int):
            raise InvalidTokenError("Invalid or expired token")

        return TokenData(user_id=user_id, email=payload.get("email"), version=version)
