"""
Store catalogue and order models

A store is owned by one user. Orders reference the buying customer (a user)
when the checkout was made while signed in; each order item is a single unit
of a product, priced at the product's current price.
"""
import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, String, Boolean, DateTime, Float, Integer, ForeignKey, Numeric, Text, Enum
from sqlalchemy.orm import relationship

from storefront.models.base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class MetricType(str, enum.Enum):
    REVENUE = "REVENUE"
    UNITS_SOLD = "UNITS_SOLD"


class TimePeriod(str, enum.Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"


class Store(Base):
    __tablename__ = "stores"

    id = Column(String(36), primary_key=True, default=_uuid)
    name = Column(String, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    products = relationship("Product", back_populates="store")
    orders = relationship("Order", back_populates="store")
    sales_goals = relationship("SalesGoal", back_populates="store")


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_uuid)
    store_id = Column(String(36), ForeignKey("stores.id"), index=True, nullable=False)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    is_archived = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    store = relationship("Store", back_populates="products")


class Order(Base):
    """
    Checkout order. Only orders with is_paid set count towards analytics.
    """
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=_uuid)
    store_id = Column(String(36), ForeignKey("stores.id"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)  # Buying customer, if signed in

    is_paid = Column(Boolean, default=False, index=True)
    phone = Column(String, default="")
    address = Column(Text, default="")  # Free text, filled in from the payment provider

    created_at = Column(DateTime, default=datetime.now, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    store = relationship("Store", back_populates="orders")
    order_items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    order_id = Column(String(36), ForeignKey("orders.id"), index=True, nullable=False)
    product_id = Column(String(36), ForeignKey("products.id"), index=True, nullable=False)

    order = relationship("Order", back_populates="order_items")
    product = relationship("Product")


class SalesGoal(Base):
    __tablename__ = "sales_goals"

    id = Column(String(36), primary_key=True, default=_uuid)
    store_id = Column(String(36), ForeignKey("stores.id"), index=True, nullable=False)
    metric_type = Column(Enum(MetricType), nullable=False)
    time_period = Column(Enum(TimePeriod), nullable=False)
    target_value = Column(Float, nullable=False)

    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    store = relationship("Store", back_populates="sales_goals")
