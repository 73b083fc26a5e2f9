from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from typing import List, Optional
import logging

from .models import CartItem
from ..products.models import Product

logger = logging.getLogger(__name__)


class CartService:

    @staticmethod
    def get_cart_items(db: Session, user_id: str) -> List[CartItem]:
        """User's cart rows, each with its product and the product's seller."""
        return db.query(CartItem)\
                 .join(CartItem.product)\
                 .options(
                     joinedload(CartItem.product).joinedload(Product.seller),
                     joinedload(CartItem.product).joinedload(Product.category),
                 )\
                 .filter(CartItem.user_id == user_id)\
                 .order_by(CartItem.created_at, CartItem.id)\
                 .all()

    @staticmethod
    def get_cart_item(db: Session, user_id: str, product_id: int) -> Optional[CartItem]:
        return db.query(CartItem).filter(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        ).first()

    @staticmethod
    def get_cart_item_by_id(db: Session, cart_item_id: int, user_id: Optional[str] = None) -> Optional[CartItem]:
        query = db.query(CartItem).filter(CartItem.id == cart_item_id)
        if user_id is not None:
            query = query.filter(CartItem.user_id == user_id)
        return query.first()

    @staticmethod
    def add_to_cart(db: Session, user_id: str, product_id: int, quantity: int = 1) -> CartItem:
        """
        Add a product or bump the quantity of the row already holding it.

        Stock is not checked here; the caller validates the request first.
        """
        try:
            existing = CartService.get_cart_item(db, user_id, product_id)
            if existing:
                return CartService._bump_quantity(db, existing, quantity)

            cart_item = CartItem(user_id=user_id, product_id=product_id, quantity=quantity)
            db.add(cart_item)
            try:
                db.commit()
            except IntegrityError:
                # A concurrent request inserted the same (user, product) row first
                db.rollback()
                existing = CartService.get_cart_item(db, user_id, product_id)
                if not existing:
                    raise
                return CartService._bump_quantity(db, existing, quantity)
            db.refresh(cart_item)
            return cart_item
        except SQLAlchemyError as e:
            logger.error(f"Error adding product {product_id} to cart of {user_id}: {e}")
            db.rollback()
            raise

    @staticmethod
    def update_cart_item(db: Session, cart_item_id: int, quantity: int, user_id: Optional[str] = None) -> Optional[CartItem]:
        """Overwrite the quantity; callers guarantee quantity >= 1."""
        cart_item = CartService.get_cart_item_by_id(db, cart_item_id, user_id)
        if not cart_item:
            return None

        cart_item.quantity = quantity
        try:
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error updating cart item {cart_item_id}: {e}")
            db.rollback()
            raise
        db.refresh(cart_item)
        return cart_item

    @staticmethod
    def remove_from_cart(db: Session, cart_item_id: int, user_id: Optional[str] = None) -> bool:
        """Delete a cart row; removing a missing row is not an error."""
        try:
            query = db.query(CartItem).filter(CartItem.id == cart_item_id)
            if user_id is not None:
                query = query.filter(CartItem.user_id == user_id)
            query.delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error removing cart item {cart_item_id}: {e}")
            db.rollback()
            raise
        return True

    @staticmethod
    def clear_cart(db: Session, user_id: str) -> None:
        """Empty the user's cart; only called after an order was placed."""
        try:
            db.query(CartItem).filter(CartItem.user_id == user_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error clearing cart of {user_id}: {e}")
            db.rollback()
            raise

    @staticmethod
    def _bump_quantity(db: Session, cart_item: CartItem, quantity: int) -> CartItem:
        db.query(CartItem)\
          .filter(CartItem.id == cart_item.id)\
          .update({CartItem.quantity: CartItem.quantity + quantity}, synchronize_session=False)
        db.commit()
        db.refresh(cart_item)
        return cart_item
