from typing import List
from fastapi import APIRouter, status

from ..auth.service import CurrentUser, CurrentMember
from ..core.exceptions import (
    InsufficientStockError, OwnProductError,
    raise_product_not_found, raise_cart_item_not_found
)
from ..database.core import DbSession
from ..products.service import ProductService
from ..schemas.base import MessageResponse
from ..schemas.cart import CartItemCreate, CartItemUpdate, CartItemResponse, CartItemWithProductResponse
from .service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=List[CartItemWithProductResponse])
def get_cart(current_user: CurrentUser, db: DbSession):
    return CartService.get_cart_items(db, current_user.user_id)


@router.post("", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
def add_to_cart(item: CartItemCreate, current_user: CurrentMember, db: DbSession):
    """
    Add a product to the caller's cart.

    Only this request's quantity is checked against current stock; what is
    already in the cart is not counted.
    """
    product = ProductService.get_product_by_id(db, item.product_id)
    if not product:
        raise_product_not_found(item.product_id)
    if product.stock < item.quantity:
        raise InsufficientStockError(product.id, item.quantity, available=product.stock)
    if product.seller_id == current_user.id:
        raise OwnProductError(product.id)

    return CartService.add_to_cart(db, current_user.id, item.product_id, item.quantity)


@router.patch("/{cart_item_id}", response_model=CartItemResponse)
def update_cart_item(cart_item_id: int, item: CartItemUpdate, current_user: CurrentUser, db: DbSession):
    cart_item = CartService.update_cart_item(db, cart_item_id, item.quantity, user_id=current_user.user_id)
    if not cart_item:
        raise_cart_item_not_found(cart_item_id)
    return cart_item


@router.delete("/{cart_item_id}", response_model=MessageResponse)
def remove_from_cart(cart_item_id: int, current_user: CurrentUser, db: DbSession):
    CartService.remove_from_cart(db, cart_item_id, user_id=current_user.user_id)
    return MessageResponse(message="Item removed from cart")
