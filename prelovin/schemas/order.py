from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import Field

from .base import CamelModel
from .product import ProductResponse
from ..orders.models import OrderStatus


class CheckoutRequest(CamelModel):
    shipping_address: str = Field(..., min_length=1)
    shipping_city: Optional[str] = Field(None, max_length=100)
    shipping_phone: Optional[str] = Field(None, max_length=20)
    notes: Optional[str] = None


class OrderCreate(CamelModel):
    """Fully formed order header handed to the storage layer."""
    buyer_id: str
    total_amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    shipping_address: str
    shipping_city: Optional[str] = None
    shipping_phone: Optional[str] = None
    notes: Optional[str] = None
    status: OrderStatus = OrderStatus.PENDING


class OrderItemCreate(CamelModel):
    """One line drafted from a cart row at checkout time."""
    product_id: int
    seller_id: str
    quantity: int = Field(..., ge=1)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    status: OrderStatus = OrderStatus.PENDING


class OrderStatusUpdate(CamelModel):
    status: OrderStatus


class OrderResponse(CamelModel):
    id: int
    buyer_id: str
    status: OrderStatus
    total_amount: Decimal
    shipping_address: str
    shipping_city: Optional[str] = None
    shipping_phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderItemResponse(CamelModel):
    id: int
    order_id: int
    product_id: int
    seller_id: str
    quantity: int
    price: Decimal
    status: OrderStatus


class OrderItemWithProductResponse(OrderItemResponse):
    # Live listing; None when it has been deleted since
    product: Optional[ProductResponse] = None


class OrderWithItemsResponse(OrderResponse):
    items: List[OrderItemWithProductResponse] = []
