"""API dependencies for authentication and service access."""

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from typing import Optional

from models.user import TokenData
from services.container import Services


bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    """Get the services wired into the application at startup."""
    return request.app.state.services


async def get_token_from_request(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[str]:
    """Extract the bearer token from the Authorization header."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(get_token_from_request),
    services: Services = Depends(get_services),
) -> TokenData:
    """Get the authenticated identity, rejecting the request without a valid token."""
    identity = await services.auth.authenticate(token)
    request.state.user = identity
    return identity


async def get_current_user_optional(
    request: Request,
    token: Optional[str] = Depends(get_token_from_request),
    services: Services = Depends(get_services),
) -> Optional[TokenData]:
    """Get the identity if a valid token was sent, otherwise return None."""
    identity = await services.auth.authenticate_optional(token)
    request.state.user = identity
    return identity
