"""
Sales goal management: upsert / delete goals and report progress with pacing.
"""
import logging
import math
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from storefront.models.store import MetricType, SalesGoal, TimePeriod
from storefront.services.goal_pacing import (
    compute_goal_progress,
    format_goal_title,
    goal_to_dict,
    get_date_range,
    get_pacing_status,
    progress_percent,
)
from storefront.services.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class GoalNotFound(LookupError):
    pass


def validate_goal_fields(metric_type, time_period, target_value):
    """Return (MetricType, TimePeriod, float) or raise ValueError."""
    if not metric_type or not time_period or target_value in (None, ""):
        raise ValueError("Missing required fields")
    try:
        metric = MetricType(metric_type)
    except ValueError:
        raise ValueError("Invalid metricType")
    try:
        period = TimePeriod(time_period)
    except ValueError:
        raise ValueError("Invalid timePeriod")
    if isinstance(target_value, bool):
        raise ValueError("targetValue must be a number")
    try:
        target = float(target_value)
    except (TypeError, ValueError):
        raise ValueError("targetValue must be a number")
    if not math.isfinite(target):
        raise ValueError("targetValue must be a number")
    if target <= 0:
        raise ValueError("targetValue must be positive")
    return metric, period, target


def upsert_goal(
    db: Session,
    store_id: str,
    metric_type,
    time_period,
    target_value,
    goal_id: Optional[str] = None,
) -> SalesGoal:
    """Update goal_id within the store if given, otherwise create a new goal."""
    metric, period, target = validate_goal_fields(metric_type, time_period, target_value)

    if goal_id:
        goal = (
            db.query(SalesGoal)
            .filter(SalesGoal.id == goal_id, SalesGoal.store_id == store_id)
            .first()
        )
        if not goal:
            raise GoalNotFound(goal_id)
        goal.metric_type = metric
        goal.time_period = period
        goal.target_value = target
    else:
        goal = SalesGoal(store_id=store_id, metric_type=metric, time_period=period, target_value=target)
        db.add(goal)

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(goal)
    logger.info(f"Saved {period.value} {metric.value} goal {goal.id} for store {store_id}")
    return goal


def delete_goal(db: Session, store_id: str, goal_id: str) -> dict:
    """Delete a goal; returns its fields as they were before deletion."""
    goal = (
        db.query(SalesGoal)
        .filter(SalesGoal.id == goal_id, SalesGoal.store_id == store_id)
        .first()
    )
    if not goal:
        raise GoalNotFound(goal_id)
    deleted = goal_to_dict(goal)
    db.delete(goal)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(f"Deleted goal {goal_id} from store {store_id}")
    return deleted


def get_goals_with_progress(
    repo: OrderRepository,
    store_id: str,
    now: Optional[datetime] = None,
) -> List[dict]:
    """
    Every goal for the store with currentProgress over its current window,
    plus pacing, progressPercent and a display title.
    """
    now = now or datetime.now()
    results = []
    for goal in repo.list_goals(store_id):
        start_date, end_date = get_date_range(goal.time_period, now)
        orders = repo.list_paid_orders(store_id, start_date=start_date, end_date=end_date)

        progress = compute_goal_progress(goal, orders, now)
        progress["pacing"] = get_pacing_status(
            progress["currentProgress"], goal.target_value, start_date, end_date, now
        )
        progress["progressPercent"] = progress_percent(progress["currentProgress"], goal.target_value)
        progress["title"] = format_goal_title(goal.metric_type, goal.time_period)
        results.append(progress)
    return results
