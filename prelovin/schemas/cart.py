from datetime import datetime
from typing import Optional
from pydantic import Field

from .base import CamelModel
from .product import ProductWithSellerResponse


class CartItemCreate(CamelModel):
    product_id: int
    quantity: int = Field(1, ge=1)


class CartItemUpdate(CamelModel):
    quantity: int = Field(..., ge=1)


class CartItemResponse(CamelModel):
    id: int
    user_id: str
    product_id: int
    quantity: int
    created_at: Optional[datetime] = None


class CartItemWithProductResponse(CartItemResponse):
    product: ProductWithSellerResponse
