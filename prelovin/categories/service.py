from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from .models import Category
from ..schemas.category import CategoryCreate

logger = logging.getLogger(__name__)


class CategoryService:

    @staticmethod
    def get_categories(db: Session) -> List[Category]:
        """All categories, in insertion order"""
        return db.query(Category).order_by(Category.id).all()

    @staticmethod
    def get_category_by_slug(db: Session, slug: str) -> Optional[Category]:
        return db.query(Category).filter(Category.slug == slug).first()

    @staticmethod
    def create_category(db: Session, category_data: CategoryCreate) -> Category:
        """Reference data is only created by the seeding script."""
        category = Category(**category_data.model_dump())
        try:
            db.add(category)
            db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error creating category {category_data.slug}: {e}")
            db.rollback()
            raise
        db.refresh(category)
        return category
