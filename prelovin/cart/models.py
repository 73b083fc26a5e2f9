from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from ..database.core import Base
from ..users.models import utcnow

class CartItem(Base):
    __tablename__ = "cart_items"
    __table_args__ = (
        # One row per (user, product); adding again bumps the quantity
        UniqueConstraint("user_id", "product_id", name="uq_cart_items_user_product"),
        CheckConstraint("quantity >= 1", name="ck_cart_items_quantity_positive"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    user = relationship("User")
    product = relationship("Product")

    def __repr__(self):
        return f"<CartItem(user_id='{self.user_id}', product_id={self.product_id}, quantity={self.quantity})>"
