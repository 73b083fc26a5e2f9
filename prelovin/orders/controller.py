from typing import List
from fastapi import APIRouter, Request, status

from ..auth.service import CurrentUser, CurrentMember
from ..core.config import settings
from ..core.exceptions import raise_order_not_found
from ..core.rate_limiter import limiter
from ..database.core import DbSession
from ..schemas.order import CheckoutRequest, OrderResponse, OrderStatusUpdate, OrderWithItemsResponse
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=List[OrderWithItemsResponse])
def get_orders(current_user: CurrentUser, db: DbSession):
    """Orders the caller placed, newest first."""
    return OrderService.get_orders(db, current_user.user_id)


@router.get("/{order_id}", response_model=OrderWithItemsResponse)
def get_order(order_id: int, current_user: CurrentUser, db: DbSession):
    order = OrderService.get_order_by_id(db, order_id)
    if not order:
        raise_order_not_found(order_id)
    if settings.ORDER_DETAIL_OWNER_ONLY and not OrderService.is_participant(order, current_user.user_id):
        # Same answer as a missing order so ids cannot be probed
        raise_order_not_found(order_id)
    return order


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("20/minute")
def checkout(request: Request, checkout_request: CheckoutRequest, current_user: CurrentMember, db: DbSession):
    """Place an order for everything in the caller's cart."""
    return OrderService.checkout(db, current_user.id, checkout_request)


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: int, status_update: OrderStatusUpdate, current_user: CurrentUser, db: DbSession):
    """Buyer or seller moves the order along pending, paid, shipped, completed."""
    order = OrderService.get_order_by_id(db, order_id)
    if not order:
        raise_order_not_found(order_id)
    return OrderService.change_status(db, order, current_user.user_id, status_update.status)
