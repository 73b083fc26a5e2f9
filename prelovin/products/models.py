# prelovin/products/models.py

import enum
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric, DateTime, ForeignKey, Enum, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from ..database.core import Base
from ..users.models import utcnow


class ProductCondition(str, enum.Enum):
    SEPERTI_BARU = "Seperti Baru"
    BAGUS = "Bagus"
    LAYAK_PAKAI = "Layak Pakai"

    @property
    def slug(self) -> str:
        """Filter id used by the catalog, e.g. "Seperti Baru" -> "seperti-baru"."""
        return condition_slug(self.value)


def condition_slug(condition: str) -> str:
    return condition.lower().replace(" ", "-")


class Product(Base):
    """A listing put up for sale by a seller."""
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    seller_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    # Only used to display a discount
    original_price = Column(Numeric(12, 2), nullable=True)
    condition = Column(
        Enum(
            ProductCondition,
            name="product_condition",
            native_enum=False,
            length=50,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
    )
    # First image is the primary one
    images = Column(JSON, nullable=False, default=list)
    stock = Column(Integer, nullable=False, default=1)
    location = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    views = Column(Integer, nullable=False, default=0)
    sold_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    seller = relationship("User")
    category = relationship("Category")

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"

    @property
    def discount_percent(self) -> int:
        if not self.original_price or self.original_price <= 0:
            return 0
        ratio = Decimal(self.price) / Decimal(self.original_price)
        return int(((1 - ratio) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
