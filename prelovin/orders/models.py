import enum
from sqlalchemy import Column, String, Integer, Numeric, DateTime, ForeignKey, Text, Enum
from sqlalchemy.orm import relationship
from ..database.core import Base
from ..users.models import utcnow

class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# Allowed moves; completed and cancelled are terminal
ORDER_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

def _status_enum(name: str):
    return Enum(
        OrderStatus,
        name=name,
        native_enum=False,
        length=50,
        values_callable=lambda members: [m.value for m in members],
    )

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    buyer_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(_status_enum("order_status"), nullable=False, default=OrderStatus.PENDING)
    # Snapshot at checkout, never recomputed
    total_amount = Column(Numeric(12, 2), nullable=False)
    shipping_address = Column(Text, nullable=False)
    shipping_city = Column(String(100), nullable=True)
    shipping_phone = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    buyer = relationship("User")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )

    def __repr__(self):
        return f"<Order(id={self.id}, buyer_id='{self.buyer_id}', status='{self.status.value if self.status else None}')>"

class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # No foreign key: history outlives the listing
    product_id = Column(Integer, nullable=False, index=True)
    seller_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    status = Column(_status_enum("order_item_status"), nullable=False, default=OrderStatus.PENDING)

    order = relationship("Order", back_populates="items")
    # Live product row for display; None once the listing is deleted
    product = relationship(
        "Product",
        primaryjoin="foreign(OrderItem.product_id) == Product.id",
        viewonly=True,
    )
