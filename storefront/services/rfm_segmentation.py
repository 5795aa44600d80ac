"""
Customer RFM segmentation

Rolls paid orders up into one metric row per customer, scores recency,
frequency and monetary value by quantile within the current customer set,
and labels each customer with a segment. Everything is recomputed from the
orders passed in on each call.
"""
import logging
from collections import Counter
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from storefront.services.order_repository import PaidOrder
from storefront.services.quantile_scoring import assign_quantile_scores, DEFAULT_QUANTILES

logger = logging.getLogger(__name__)

OTHER_SEGMENT = "Other"

# Evaluated top to bottom, first match wins. Several rules overlap
# (e.g. 3/4/4 is "Loyal Customers", never "Potential Loyalists"), so the
# order here decides the label.
SEGMENT_RULES: List[Tuple[Callable[[int, int, int], bool], str]] = [
    (lambda r, f, m: r >= 4 and f >= 4 and m >= 4, "Champions"),
    (lambda r, f, m: r >= 3 and f >= 3 and m >= 3, "Loyal Customers"),
    (lambda r, f, m: r >= 4 and f >= 1 and m >= 1, "Recent Customers"),
    (lambda r, f, m: r >= 3 and f >= 4 and m >= 4, "Potential Loyalists"),
    (lambda r, f, m: r <= 2 and f >= 3 and m >= 3, "At Risk"),
    (lambda r, f, m: r <= 2 and f <= 2 and m <= 2, "Lost"),
    (lambda r, f, m: r <= 3 and f <= 3 and m >= 4, "High Spenders (Needs Attention)"),
    (lambda r, f, m: r >= 3 and f <= 3 and m <= 3, "Low Spenders (Recent)"),
]


@dataclass
class CustomerMetric:
    customer_id: str
    last_purchase_date: datetime
    order_count: int = 0
    total_spent: float = 0.0


@dataclass
class ScoredCustomerMetric(CustomerMetric):
    days_since_last_purchase: int = 0
    recency_score: int = 0
    frequency_score: int = 0
    monetary_score: int = 0
    segment: str = OTHER_SEGMENT


def aggregate_customer_metrics(orders: Iterable[PaidOrder]) -> List[CustomerMetric]:
    """One CustomerMetric per customer id, in first-seen order. Orders without a customer are skipped."""
    metrics: Dict[str, CustomerMetric] = {}
    for order in orders:
        if not order.customer_id:
            continue
        metric = metrics.get(order.customer_id)
        if metric is None:
            metric = CustomerMetric(customer_id=order.customer_id, last_purchase_date=order.created_at)
            metrics[order.customer_id] = metric

        metric.order_count += 1
        metric.total_spent += order.total
        if order.created_at > metric.last_purchase_date:
            metric.last_purchase_date = order.created_at
    return list(metrics.values())


def score_customers(
    metrics: List[CustomerMetric],
    now: Optional[datetime] = None,
    quantiles: int = DEFAULT_QUANTILES,
) -> List[ScoredCustomerMetric]:
    """
    Attach R / F / M quantile scores (1..quantiles) and a segment label.

    Recency ranks by whole days since the last purchase, stalest first, so the
    most recent buyers land in the top bucket. Frequency and monetary rank
    ascending on order count and total spend.
    """
    if not metrics:
        return []
    now = now or datetime.now()

    scored = [
        ScoredCustomerMetric(
            customer_id=m.customer_id,
            last_purchase_date=m.last_purchase_date,
            order_count=m.order_count,
            total_spent=m.total_spent,
            days_since_last_purchase=(now - m.last_purchase_date).days,
        )
        for m in metrics
    ]

    for c, score in assign_quantile_scores(
        scored, key=lambda c: c.days_since_last_purchase, quantiles=quantiles, descending=True
    ):
        c.recency_score = score
    for c, score in assign_quantile_scores(scored, key=lambda c: c.order_count, quantiles=quantiles):
        c.frequency_score = score
    for c, score in assign_quantile_scores(scored, key=lambda c: c.total_spent, quantiles=quantiles):
        c.monetary_score = score

    return [
        replace(c, segment=classify_segment(c.recency_score, c.frequency_score, c.monetary_score))
        for c in scored
    ]


def classify_segment(r: int, f: int, m: int) -> str:
    """Map R/F/M scores to a named segment."""
    for predicate, label in SEGMENT_RULES:
        if predicate(r, f, m):
            return label
    return OTHER_SEGMENT


def count_segments(customers: Iterable[ScoredCustomerMetric]) -> List[dict]:
    """Customer count per segment, largest first. Equal counts keep first-seen order."""
    counts = Counter(c.segment for c in customers)
    rows = [{"segment": segment, "customerCount": count} for segment, count in counts.items()]
    return sorted(rows, key=lambda row: row["customerCount"], reverse=True)


def segment_customers(
    orders: Iterable[PaidOrder],
    now: Optional[datetime] = None,
    quantiles: int = DEFAULT_QUANTILES,
) -> List[dict]:
    """Paid orders in, [{segment, customerCount}] out."""
    metrics = aggregate_customer_metrics(orders)
    if not metrics:
        return []
    customers = score_customers(metrics, now=now, quantiles=quantiles)
    logger.debug(f"Segmented {len(customers)} customers")
    return count_segments(customers)
