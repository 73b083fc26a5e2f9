from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session, selectinload, joinedload
from sqlalchemy.exc import SQLAlchemyError
import logging

from .models import Order, OrderItem, OrderStatus, ORDER_STATUS_TRANSITIONS
from ..cart.service import CartService
from ..core.exceptions import (
    PrelovinError, InsufficientStockError, EmptyCartError, ForbiddenError,
    InvalidStatusTransitionError, OrderPlacementError
)
from ..products.models import Product
from ..schemas.order import CheckoutRequest, OrderCreate, OrderItemCreate

logger = logging.getLogger(__name__)


class OrderService:

    @staticmethod
    def _with_items(db: Session):
        return db.query(Order).options(
            selectinload(Order.items).joinedload(OrderItem.product)
        )

    @staticmethod
    def get_orders(db: Session, user_id: str) -> List[Order]:
        """Orders placed by the user, newest first, each with its lines."""
        return OrderService._with_items(db)\
                 .filter(Order.buyer_id == user_id)\
                 .order_by(Order.created_at.desc(), Order.id.desc())\
                 .all()

    @staticmethod
    def get_order_by_id(db: Session, order_id: int) -> Optional[Order]:
        """Order with its lines; no ownership filter is applied here."""
        return OrderService._with_items(db).filter(Order.id == order_id).first()

    @staticmethod
    def create_order(db: Session, order_data: OrderCreate, items: List[OrderItemCreate]) -> Order:
        """
        Persist an order, its lines and the stock movement as one transaction.

        Each line decrements the product's stock and bumps its sold count in a
        single UPDATE guarded by ``stock >= quantity``. When a guard fails the
        whole order is rolled back and ``InsufficientStockError`` is raised; a
        product that no longer exists raises ``OrderPlacementError``. Nothing
        is committed unless every line went through.
        """
        try:
            order = Order(**order_data.model_dump())
            db.add(order)
            db.flush()

            for item in items:
                db.add(OrderItem(order_id=order.id, **item.model_dump()))

                updated = db.query(Product)\
                            .filter(Product.id == item.product_id, Product.stock >= item.quantity)\
                            .update({
                                Product.stock: Product.stock - item.quantity,
                                Product.sold_count: Product.sold_count + item.quantity,
                            }, synchronize_session=False)
                if updated:
                    continue

                remaining = db.query(Product.stock).filter(Product.id == item.product_id).scalar()
                if remaining is None:
                    raise OrderPlacementError(
                        "A product in your cart is no longer available",
                        technical_details=f"product {item.product_id} vanished during order placement",
                        context={"product_id": item.product_id},
                    )
                raise InsufficientStockError(item.product_id, item.quantity, available=remaining, at_checkout=True)

            db.commit()
        except PrelovinError:
            db.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error placing order for buyer {order_data.buyer_id}: {e}")
            db.rollback()
            raise OrderPlacementError(
                "Failed to create order",
                technical_details=str(e),
                context={"buyer_id": order_data.buyer_id},
            ) from e

        logger.info(f"Placed order {order.id} for buyer {order.buyer_id} with {len(items)} item(s)")
        return order

    @staticmethod
    def update_order_status(db: Session, order_id: int, status: OrderStatus) -> Optional[Order]:
        order = db.query(Order).filter(Order.id == order_id).first()
        if not order:
            return None

        order.status = status
        try:
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error updating status of order {order_id}: {e}")
            db.rollback()
            raise
        db.refresh(order)
        return order

    @staticmethod
    def checkout(db: Session, buyer_id: str, request: CheckoutRequest) -> Order:
        """
        Turn the buyer's cart into an order priced at today's product prices.

        The cart is cleared only after the order has been committed.
        """
        cart_items = CartService.get_cart_items(db, buyer_id)
        if not cart_items:
            raise EmptyCartError()

        total_amount = sum(
            (Decimal(item.product.price) * item.quantity for item in cart_items),
            Decimal("0"),
        )
        drafts = [
            OrderItemCreate(
                product_id=item.product_id,
                seller_id=item.product.seller_id,
                quantity=item.quantity,
                price=item.product.price,
                status=OrderStatus.PENDING,
            )
            for item in cart_items
        ]
        order_data = OrderCreate(
            buyer_id=buyer_id,
            total_amount=total_amount,
            shipping_address=request.shipping_address,
            shipping_city=request.shipping_city,
            shipping_phone=request.shipping_phone,
            notes=request.notes,
            status=OrderStatus.PENDING,
        )

        order = OrderService.create_order(db, order_data, drafts)
        CartService.clear_cart(db, buyer_id)
        return order

    @staticmethod
    def is_participant(order: Order, user_id: str) -> bool:
        """Buyer of the order or seller of at least one of its lines."""
        return order.buyer_id == user_id or any(item.seller_id == user_id for item in order.items)

    @staticmethod
    def change_status(db: Session, order: Order, user_id: str, new_status: OrderStatus) -> Order:
        """Move an order along its lifecycle on behalf of a participant."""
        if not OrderService.is_participant(order, user_id):
            raise ForbiddenError("Not authorized to update this order", context={"order_id": order.id})

        current = OrderStatus(order.status)
        if new_status not in ORDER_STATUS_TRANSITIONS[current]:
            raise InvalidStatusTransitionError(current.value, new_status.value)

        logger.info(f"Order {order.id}: {current.value} -> {new_status.value} by {user_id}")
        return OrderService.update_order_status(db, order.id, new_status)
