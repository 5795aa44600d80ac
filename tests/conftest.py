"""
Pytest configuration and fixtures

- Points the app at a throwaway SQLite database before anything imports it
- Fresh tables per test
- In-memory order repository for service-level tests
- Authenticated TestClient with an owned store
"""
import os
import tempfile
from datetime import datetime
from decimal import Decimal

_tmp_dir = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}"
os.environ["LOG_DIR"] = os.path.join(_tmp_dir, "logs")
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient

from storefront.models.base import Base, SessionLocal, engine
from storefront.models.store import Order, OrderItem, Product, Store
from storefront.services import auth_service
from storefront.services.order_repository import LineItem, PaidOrder, PERIOD_ORDER


class InMemoryOrderRepository:
    """OrderRepository over plain lists."""

    def __init__(self, orders=None, goals=None, fail=False):
        self.orders = list(orders or [])
        self.goals = list(goals or [])
        self.fail = fail
        self.calls = []

    def list_paid_orders(self, store_id, start_date=None, end_date=None, customers_only=False):
        self.calls.append((store_id, start_date, end_date, customers_only))
        if self.fail:
            raise RuntimeError("database unavailable")
        return [
            o for o in self.orders
            if (start_date is None or o.created_at >= start_date)
            and (end_date is None or o.created_at <= end_date)
            and (not customers_only or o.customer_id)
        ]

    def list_goals(self, store_id):
        return sorted(self.goals, key=lambda g: PERIOD_ORDER[g.time_period])


def paid_order(created_at, prices, customer_id=None, address="", order_id=None):
    """PaidOrder with one line item per price."""
    return PaidOrder(
        id=order_id or f"order-{created_at.isoformat()}-{customer_id}",
        created_at=created_at,
        customer_id=customer_id,
        address=address,
        line_items=[LineItem(product_id=f"p{i}", product_name=f"Product {i}", unit_price=p) for i, p in enumerate(prices)],
    )


@pytest.fixture(autouse=True)
def fresh_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def owner(db):
    return auth_service.create_user(db, "owner@example.com", "correct-horse", "Owner")


@pytest.fixture
def store(db, owner):
    s = Store(name="Main Street Tees", user_id=owner.id)
    db.add(s)
    db.commit()
    db.refresh(s)
    return s


@pytest.fixture
def client(db, owner):
    from storefront.main import app

    token = auth_service.create_session(db, owner.id)
    c = TestClient(app)
    c.cookies.set("session_token", token)
    return c


@pytest.fixture
def anon_client():
    from storefront.main import app

    return TestClient(app)


@pytest.fixture
def make_order(db):
    """Persist an order with one product per price."""
    def _make(store, created_at, prices, customer_id=None, address="", is_paid=True):
        order = Order(
            store_id=store.id,
            user_id=customer_id,
            is_paid=is_paid,
            address=address,
            created_at=created_at,
        )
        db.add(order)
        for i, price in enumerate(prices):
            product = Product(store_id=store.id, name=f"Item {price} #{i}", price=Decimal(str(price)))
            db.add(product)
            db.flush()
            order.order_items.append(OrderItem(product_id=product.id))
        db.commit()
        return order
    return _make


FIXED_NOW = datetime(2026, 10, 14, 12, 0, 0)  # Wednesday
