from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from cloud_kitchen.core.clock import utcnow
from cloud_kitchen.domain.order_status import OrderStatus, PaymentStatus
from cloud_kitchen.infrastructure.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    # Exact decimal string, e.g. "449" or "39.50"
    price = Column(String, nullable=False)
    category = Column(String, nullable=False, index=True)
    image_url = Column(String, nullable=False, default="")
    available = Column(Boolean, nullable=False, default=True)
    sizes = Column(JSON, nullable=True)  # [{"label": "2 pcs", "price": "40"}]
    badges = Column(JSON, nullable=False, default=list)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=True)
    role = Column(String, nullable=False, default="customer")  # customer, admin
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    # Grouping key for customer analytics
    customer_phone_normalized = Column(String, nullable=False, index=True)
    customer_email = Column(String, nullable=True)
    customer_address = Column(Text, nullable=False)
    total_amount = Column(String, nullable=False)
    status = Column(String, nullable=False, default=OrderStatus.PENDING.value, index=True)
    payment_status = Column(String, nullable=False, default=PaymentStatus.UNPAID.value)
    payment_reference = Column(String, nullable=True)
    cookie_consent = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # Weak reference: products can be hard-deleted while the line survives.
    product_id = Column(Integer, nullable=False, index=True)
    product_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    price_at_time = Column(String, nullable=False)
    selected_size = Column(String, nullable=True)

    order = relationship("Order", back_populates="items")
