"""
Quote Models

Defines schemas for catalog quotes and user favorites.
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class Quote(BaseModel):
    """Schema for a catalog quote."""

    id: int = Field(..., ge=1, description="Numeric quote identifier")
    text: str = Field(..., description="Quote text")
    author: str = Field(..., description="Who said or wrote it")
    category: str = Field(..., description="Lowercased category name")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: dict) -> "Quote":
        return cls(
            id=document["id"],
            text=document["text"],
            author=document["author"],
            category=document["category"],
            created_at=document.get("created_at"),
            updated_at=document.get("updated_at"),
        )


class Favorite(BaseModel):
    """Schema for a user's favorite quote."""

    quote_id: int = Field(..., description="Favorited quote identifier")
    added_at: datetime = Field(..., description="When the favorite was added")
    quote: Optional[Quote] = Field(default=None, description="The quote, if still in the catalog")
