"""
Sales goal progress and pacing

Derives the current calendar window for a goal's time period, rolls up the
goal's metric over paid orders inside that window, and compares actual
progress against linearly interpolated expected progress.

All datetimes are naive local time.
"""
import calendar
from datetime import datetime, time, timedelta
from typing import Iterable, Optional, Tuple

from storefront.models.store import MetricType, TimePeriod
from storefront.services.order_repository import PaidOrder

# On pace within 5% under expected; ahead beyond 10% over expected
PACE_TOLERANCE = 0.05
AHEAD_MARGIN = PACE_TOLERANCE * 2

END_OF_DAY = time(23, 59, 59, 999000)

METRIC_LABELS = {MetricType.REVENUE: "Revenue", MetricType.UNITS_SOLD: "Units Sold"}
PERIOD_LABELS = {TimePeriod.DAILY: "Daily", TimePeriod.WEEKLY: "Weekly", TimePeriod.MONTHLY: "Monthly"}


def get_date_range(time_period: TimePeriod, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Window containing `now` for a goal period.

    DAILY   today 00:00:00.000 .. 23:59:59.999
    WEEKLY  Monday 00:00:00.000 .. Sunday 23:59:59.999 (Sunday closes the week)
    MONTHLY day 1 00:00:00.000 .. last day 23:59:59.999
    """
    now = now or datetime.now()
    today = now.date()
    period = TimePeriod(time_period)

    if period == TimePeriod.DAILY:
        first_day = last_day = today
    elif period == TimePeriod.WEEKLY:
        first_day = today - timedelta(days=today.weekday())
        last_day = first_day + timedelta(days=6)
    else:
        days_in_month = calendar.monthrange(today.year, today.month)[1]
        first_day = today.replace(day=1)
        last_day = today.replace(day=days_in_month)

    return datetime.combine(first_day, time.min), datetime.combine(last_day, END_OF_DAY)


def compute_metric(metric_type: MetricType, orders: Iterable[PaidOrder]) -> float:
    """REVENUE sums line-item prices; UNITS_SOLD counts line items."""
    metric = MetricType(metric_type)
    if metric == MetricType.REVENUE:
        return sum(order.total for order in orders)
    return sum(len(order.line_items) for order in orders)


def compute_goal_progress(goal, orders: Iterable[PaidOrder], now: Optional[datetime] = None) -> dict:
    """
    Goal fields plus currentProgress, startDate and endDate for the current
    window. Orders outside the window are ignored.
    """
    start_date, end_date = get_date_range(goal.time_period, now)
    in_window = [o for o in orders if start_date <= o.created_at <= end_date]
    return {
        **goal_to_dict(goal),
        "currentProgress": compute_metric(goal.metric_type, in_window),
        "startDate": start_date,
        "endDate": end_date,
    }


def get_pacing_status(
    current_progress: float,
    target_value: float,
    start_date: Optional[datetime],
    end_date: Optional[datetime],
    now: Optional[datetime] = None,
) -> dict:
    """
    Classify progress against the time elapsed in the window.

    Returns {"status": "ahead" | "on_pace" | "behind", "label": ...}.
    """
    if start_date is None or end_date is None or end_date <= start_date:
        return {"status": "behind", "label": "Invalid Date Range"}

    now = now or datetime.now()
    total = (end_date - start_date).total_seconds()
    elapsed = (now - start_date).total_seconds()

    if elapsed < 0:
        return {"status": "on_pace", "label": "Not Started"}
    if elapsed > total:
        if current_progress >= target_value:
            return {"status": "ahead", "label": "Met"}
        return {"status": "behind", "label": "Missed"}

    elapsed_fraction = min(1.0, max(0.0, elapsed / total))
    expected = target_value * elapsed_fraction

    if current_progress >= expected * (1 - PACE_TOLERANCE):
        if current_progress > expected * (1 + AHEAD_MARGIN):
            return {"status": "ahead", "label": "Ahead"}
        return {"status": "on_pace", "label": "On Pace"}
    return {"status": "behind", "label": "Behind"}


def progress_percent(current_progress: float, target_value: float) -> float:
    if target_value <= 0:
        return 0.0
    return current_progress / target_value * 100


def format_goal_title(metric_type: MetricType, time_period: TimePeriod) -> str:
    """e.g. 'Monthly Revenue Goal'"""
    return f"{PERIOD_LABELS[TimePeriod(time_period)]} {METRIC_LABELS[MetricType(metric_type)]} Goal"


def goal_to_dict(goal) -> dict:
    return {
        "id": goal.id,
        "storeId": goal.store_id,
        "metricType": MetricType(goal.metric_type).value,
        "timePeriod": TimePeriod(goal.time_period).value,
        "targetValue": goal.target_value,
        "createdAt": getattr(goal, "created_at", None),
        "updatedAt": getattr(goal, "updated_at", None),
    }
