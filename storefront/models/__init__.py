"""Database models for the storefront admin API"""

from storefront.models.user import User, UserSession

from storefront.models.store import (
    MetricType,
    TimePeriod,
    Store,
    Product,
    Order,
    OrderItem,
    SalesGoal
)
