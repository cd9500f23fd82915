"""Favorites router: per-user quote bookmarks (all routes require a token)."""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_current_user, get_services
from models.user import TokenData
from services.container import Services


router = APIRouter(prefix="/api/favorites", tags=["Favorites"])


@router.get("")
async def list_favorites(
    current_user: TokenData = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """List the current user's favorite quotes, newest first."""
    favorites = await services.favorites.list(current_user.user_id)
    return {"success": True, "count": len(favorites), "favorites": favorites}


@router.get("/check/{quote_id}")
async def check_favorite(
    quote_id: str,
    current_user: TokenData = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Check if a quote is in the current user's favorites."""
    is_favorite = await services.favorites.exists(current_user.user_id, quote_id)
    return {"success": True, "is_favorite": is_favorite}


@router.post("/{quote_id}", status_code=status.HTTP_201_CREATED)
async def add_favorite(
    quote_id: str,
    current_user: TokenData = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Add a quote to the current user's favorites."""
    await services.favorites.add(current_user.user_id, quote_id)
    return {"success": True, "message": "Quote added to favorites"}


@router.delete("/{quote_id}")
async def remove_favorite(
    quote_id: str,
    current_user: TokenData = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Remove a quote from the current user's favorites."""
    await services.favorites.remove(current_user.user_id, quote_id)
    return {"success": True, "message": "Quote removed from favorites"}
