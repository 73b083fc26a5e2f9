from typing import List, Optional, Dict, Any
from sqlalchemy import func, case
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import SQLAlchemyError
import logging

from .models import Product
from ..cart.models import CartItem
from ..schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductService:

    @staticmethod
    def _with_seller(db: Session):
        return db.query(Product).options(
            joinedload(Product.seller),
            joinedload(Product.category),
        )

    @staticmethod
    def get_products(db: Session, category_id: Optional[int] = None, seller_id: Optional[str] = None) -> List[Product]:
        """
        Active listings with seller and category loaded, newest first.

        Inactive products never appear here, whatever the filters.
        """
        query = ProductService._with_seller(db).filter(Product.is_active.is_(True))
        if category_id is not None:
            query = query.filter(Product.category_id == category_id)
        if seller_id is not None:
            query = query.filter(Product.seller_id == seller_id)
        return query.order_by(Product.created_at.desc(), Product.id.desc()).all()

    @staticmethod
    def get_product_by_id(db: Session, product_id: int) -> Optional[Product]:
        """Single listing with seller and category, active or not."""
        return ProductService._with_seller(db).filter(Product.id == product_id).first()

    @staticmethod
    def get_products_by_seller(db: Session, seller_id: str) -> List[Product]:
        """Seller dashboard listing, inactive products included."""
        return db.query(Product)\
                 .filter(Product.seller_id == seller_id)\
                 .order_by(Product.created_at.desc(), Product.id.desc())\
                 .all()

    @staticmethod
    def get_seller_stats(db: Session, seller_id: str) -> Dict[str, Any]:
        total_products, active_products, total_sold, total_views = db.query(
            func.count(Product.id),
            func.coalesce(func.sum(case((Product.is_active.is_(True), 1), else_=0)), 0),
            func.coalesce(func.sum(Product.sold_count), 0),
            func.coalesce(func.sum(Product.views), 0),
        ).filter(Product.seller_id == seller_id).one()

        return {
            "total_products": int(total_products),
            "active_products": int(active_products),
            "total_sold": int(total_sold),
            "total_views": int(total_views),
        }

    @staticmethod
    def create_product(db: Session, seller_id: str, product_data: ProductCreate) -> Product:
        """Create a listing; counters always start at zero."""
        product = Product(
            **product_data.model_dump(),
            seller_id=seller_id,
            views=0,
            sold_count=0,
        )
        try:
            db.add(product)
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error creating product for seller {seller_id}: {e}")
            db.rollback()
            raise
        db.refresh(product)
        logger.info(f"Created product {product.id} for seller {seller_id}")
        return product

    @staticmethod
    def update_product(db: Session, product_id: int, product_data: ProductUpdate) -> Optional[Product]:
        """Merge the supplied fields into the listing."""
        product = db.query(Product).filter(Product.id == product_id).first()
        if not product:
            return None

        for field, value in product_data.model_dump(exclude_unset=True).items():
            setattr(product, field, value)

        try:
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error updating product {product_id}: {e}")
            db.rollback()
            raise
        db.refresh(product)
        return product

    @staticmethod
    def delete_product(db: Session, product_id: int) -> bool:
        """
        Hard delete a listing.

        Cart rows pointing at it go too. Order items keep their product id
        and price snapshot, their live product just resolves to nothing.
        """
        try:
            db.query(CartItem).filter(CartItem.product_id == product_id).delete(synchronize_session=False)
            deleted = db.query(Product).filter(Product.id == product_id).delete(synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error deleting product {product_id}: {e}")
            db.rollback()
            raise
        return deleted > 0

    @staticmethod
    def increment_product_views(db: Session, product_id: int) -> None:
        """views = views + 1, computed by the database."""
        try:
            db.query(Product)\
              .filter(Product.id == product_id)\
              .update({Product.views: Product.views + 1}, synchronize_session=False)
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error incrementing views for product {product_id}: {e}")
            db.rollback()
            raise
