from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .db import Base
from .statuses import OrderStatus, PaymentStatus, UserRole


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    phone = Column(String(32), unique=True, index=True, nullable=False)
    email = Column(String(320), nullable=True)
    password_hash = Column(String(255), nullable=True)
    role = Column(String(32), default=UserRole.CUSTOMER.value, nullable=False)

    orders = relationship("Order", back_populates="user")


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    description = Column(String(500), nullable=False)
    price = Column(Integer, nullable=False)
    category = Column(String(80), nullable=False)
    image_url = Column(String(500), nullable=False)
    available = Column(Boolean, default=True, nullable=False)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(Text, default=OrderStatus.PENDING.value, nullable=False)
    items_json = Column(Text, nullable=False)
    total = Column(Integer, nullable=False)
    pickup_time = Column(String(5), nullable=False, index=True)
    special_instructions = Column(Text, nullable=True)
    payment_status = Column(
        String(32), default=PaymentStatus.PENDING.value, nullable=False
    )
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="orders")
    payments = relationship("Payment", back_populates="order")


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    amount = Column(Integer, nullable=False)
    status = Column(String(32), default="completed", nullable=False)
    payment_method = Column(String(32), nullable=False)
    payment_type = Column(String(32), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    order = relationship("Order", back_populates="payments")


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    type = Column(String(64), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(16), default="unread", nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
