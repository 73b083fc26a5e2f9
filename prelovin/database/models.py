# Central models file; importing it registers every table on Base.metadata

from .core import Base

from ..users.models import User
from ..categories.models import Category
from ..products.models import Product, ProductCondition
from ..cart.models import CartItem
from ..orders.models import Order, OrderItem, OrderStatus

__all__ = [
    "Base",
    "User",
    "Category",
    "Product",
    "ProductCondition",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
]
