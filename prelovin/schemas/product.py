from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import Field, field_validator

from .base import CamelModel
from .category import CategoryResponse
from .user import PublicUserResponse
from ..products.models import ProductCondition


class ProductCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    price: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    category_id: Optional[int] = None
    condition: ProductCondition
    images: List[str] = Field(default_factory=list)
    stock: int = Field(1, ge=0)
    location: Optional[str] = Field(None, max_length=100)
    is_active: bool = True

    @field_validator("images")
    @classmethod
    def strip_blank_images(cls, images: List[str]) -> List[str]:
        return [url.strip() for url in images if url and url.strip()]


class ProductUpdate(CamelModel):
    """Partial update; only the fields sent by the seller are applied."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    original_price: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    category_id: Optional[int] = None
    condition: Optional[ProductCondition] = None
    images: Optional[List[str]] = None
    stock: Optional[int] = Field(None, ge=0)
    location: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None

    @field_validator("name", "price", "condition", "images", "stock", "is_active")
    @classmethod
    def reject_null(cls, value, info):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class ProductResponse(CamelModel):
    id: int
    seller_id: str
    category_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    price: Decimal
    original_price: Optional[Decimal] = None
    condition: ProductCondition
    images: List[str] = []
    stock: int
    location: Optional[str] = None
    is_active: bool
    views: int
    sold_count: int
    discount_percent: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductWithSellerResponse(ProductResponse):
    seller: PublicUserResponse
    category: Optional[CategoryResponse] = None


class SellerStatsResponse(CamelModel):
    total_products: int
    active_products: int
    total_sold: int
    total_views: int
