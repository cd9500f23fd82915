"""Quotes router: public read access to the quote catalog."""

from typing import Optional

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user_optional, get_services
from models.user import TokenData
from services.container import Services


router = APIRouter(prefix="/api/quotes", tags=["Quotes"])


@router.get("")
async def list_quotes(services: Services = Depends(get_services)):
    """Get all quotes."""
    quotes = await services.quotes.all()
    return {"success": True, "count": len(quotes), "data": quotes}


@router.get("/random")
async def random_quote(services: Services = Depends(get_services)):
    """Get a random quote."""
    quote = await services.quotes.random()
    return {"success": True, "data": quote}


@router.get("/category/{category}")
async def quotes_by_category(category: str, services: Services = Depends(get_services)):
    """Get quotes in a category (case-insensitive)."""
    quotes = await services.quotes.by_category(category)
    return {"success": True, "count": len(quotes), "data": quotes}


@router.get("/{quote_id}")
async def get_quote(
    quote_id: str,
    current_user: Optional[TokenData] = Depends(get_current_user_optional),
    services: Services = Depends(get_services),
):
    """Get a quote by ID; signed-in callers also learn whether it is a favorite."""
    quote = await services.quotes.by_id(quote_id)

    response = {"success": True, "data": quote}
    if current_user is not None:
        response["is_favorite"] = await services.favorites.exists(current_user.user_id, quote.id)
    return response
