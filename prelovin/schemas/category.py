from typing import Optional
from pydantic import Field

from .base import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    icon: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None


class CategoryResponse(CategoryCreate):
    id: int
