"""Authentication router for user registration, login, and profile management."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from api.dependencies import (
    get_current_user,
    get_current_user_optional,
    get_services,
)
from models.user import TokenData, UserCreate, UserLogin, UserUpdate
from services.container import Services
from services.errors import ValidationError


router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, services: Services = Depends(get_services)):
    """Register a new user account and return a token for it."""
    user = await services.users.register(user_data.email, user_data.password, user_data.name)
    token = services.tokens.issue(user.id, user.email, user.token_version)

    return {
        "success": True,
        "message": "User registered successfully",
        "user": user,
        "token": token,
    }


@router.post("/login")
async def login(user_data: UserLogin, services: Services = Depends(get_services)):
    """Authenticate user and return JWT token."""
    user = await services.users.login(user_data.email, user_data.password)
    token = services.tokens.issue(user.id, user.email, user.token_version)

    return {
        "success": True,
        "message": "Login successful",
        "user": user,
        "token": token,
    }


@router.post("/logout")
async def logout():
    """Acknowledge a logout; tokens are stateless, so the client discards its own."""
    return {"success": True, "message": "Successfully logged out"}


@router.get("/verify")
async def verify_token(current_user: Optional[TokenData] = Depends(get_current_user_optional)):
    """Report whether the presented token is currently valid."""
    if current_user is None:
        return {"success": True, "valid": False}

    return {
        "success": True,
        "valid": True,
        "user_id": current_user.user_id,
        "email": current_user.email,
    }


@router.get("/profile")
async def get_profile(
    current_user: TokenData = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Get current authenticated user information."""
    user = await services.users.get_by_id(current_user.user_id)
    return {"success": True, "user": user}


@router.put("/profile")
async def update_profile(
    update: UserUpdate,
    current_user: TokenData = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """
    Update the current user's name and/or email.

    An email change revokes existing tokens, so the response carries a
    replacement token.
    """
    if not update.name and not update.email:
        raise ValidationError("No fields to update")

    user = await services.users.update(
        current_user.user_id,
        name=update.name or None,
        email=update.email or None,
    )

    response = {"success": True, "message": "User updated successfully"}
    if user.token_version != current_user.version:
        response["token"] = services.tokens.issue(user.id, user.email, user.token_version)
    return response


@router.delete("/profile")
async def delete_profile(
    current_user: TokenData = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Delete the current user's account and favorites."""
    await services.users.delete(current_user.user_id)
    return {"success": True, "message": "User deleted successfully"}
