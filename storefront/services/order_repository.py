"""
Order repository

Read-side access to paid orders and sales goals. Analytics services take an
OrderRepository instead of a database session so they can run over in-memory
fixtures; SqlOrderRepository is the SQLAlchemy-backed implementation used by
the API.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Protocol

from sqlalchemy.orm import Session, selectinload

from storefront.models.store import Order, OrderItem, SalesGoal, TimePeriod

logger = logging.getLogger(__name__)

PERIOD_ORDER = {TimePeriod.DAILY: 0, TimePeriod.WEEKLY: 1, TimePeriod.MONTHLY: 2}


@dataclass
class LineItem:
    """One unit of a product on a paid order."""
    product_id: str
    product_name: str
    unit_price: float


@dataclass
class PaidOrder:
    id: str
    created_at: datetime
    customer_id: Optional[str] = None
    address: str = ""
    line_items: List[LineItem] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(item.unit_price for item in self.line_items)


class OrderRepository(Protocol):
    def list_paid_orders(
        self,
        store_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        customers_only: bool = False,
    ) -> List[PaidOrder]:
        ...

    def list_goals(self, store_id: str) -> List[SalesGoal]:
        ...


class SqlOrderRepository:
    """OrderRepository over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def list_paid_orders(
        self,
        store_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        customers_only: bool = False,
    ) -> List[PaidOrder]:
        """
        Paid orders for a store, oldest first. Date bounds are inclusive.
        """
        query = (
            self.db.query(Order)
            .options(selectinload(Order.order_items).selectinload(OrderItem.product))
            .filter(Order.store_id == store_id)
            .filter(Order.is_paid.is_(True))
        )
        if start_date is not None:
            query = query.filter(Order.created_at >= start_date)
        if end_date is not None:
            query = query.filter(Order.created_at <= end_date)
        if customers_only:
            query = query.filter(Order.user_id.isnot(None))

        orders = query.order_by(Order.created_at.asc()).all()
        logger.debug(f"Loaded {len(orders)} paid orders for store {store_id}")
        return [self._to_paid_order(o) for o in orders]

    def list_goals(self, store_id: str) -> List[SalesGoal]:
        goals = self.db.query(SalesGoal).filter(SalesGoal.store_id == store_id).all()
        return sorted(goals, key=lambda g: PERIOD_ORDER.get(g.time_period, len(PERIOD_ORDER)))

    @staticmethod
    def _to_paid_order(order: Order) -> PaidOrder:
        return PaidOrder(
            id=order.id,
            created_at=order.created_at,
            customer_id=str(order.user_id) if order.user_id is not None else None,
            address=order.address or "",
            line_items=[
                LineItem(
                    product_id=item.product_id,
                    product_name=item.product.name,
                    unit_price=float(item.product.price or 0),
                )
                for item in order.order_items
            ],
        )
