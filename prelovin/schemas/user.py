from datetime import datetime
from typing import Optional
from pydantic import EmailStr

from .base import CamelModel


class UpsertUser(CamelModel):
    """Identity fields pushed by the identity provider."""
    id: str
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None


class PublicUserResponse(CamelModel):
    """User as shown to other members; email, phone and address are private."""
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    city: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserResponse(PublicUserResponse):
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
