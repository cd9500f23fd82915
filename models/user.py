"""User models for authentication and database storage."""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class UserCreate(BaseModel):
    """Schema for user registration."""
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)


class UserLogin(BaseModel):
    """Schema for user login."""
    email: str
    password: str


class UserUpdate(BaseModel):
    """Schema for profile updates (all fields optional)."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None


class UserResponse(BaseModel):
    """Schema for user response (without sensitive data)."""
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    token_version: int = Field(default=0, exclude=True)

    @classmethod
    def from_document(cls, document: dict) -> "UserResponse":
        """Build a response from a stored user, dropping the password hash."""
        return cls(
            id=str(document["_id"]),
            name=document.get("name", ""),
            email=document["email"],
            created_at=document["created_at"],
            updated_at=document.get("updated_at"),
            token_version=document.get("token_version", 0),
        )


class TokenData(BaseModel):
    """Schema for decoded token data."""
    user_id: str
    email: Optional[str] = None
    version: int = 0
