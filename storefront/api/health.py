"""
Health check and status endpoints
"""
from fastapi import APIRouter, Depends
from datetime import datetime
from sqlalchemy import text
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront import __version__
from storefront.models.base import get_db
from storefront.models.store import Order, SalesGoal, Store
from storefront.services.goal_pacing import AHEAD_MARGIN, PACE_TOLERANCE
from storefront.utils.logger import log

settings = get_settings()

router = APIRouter()


@router.get("/health")
async def health_check():
    """Liveness check; never touches the database"""
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": __version__
    }


@router.get("/status")
async def get_status(db: Session = Depends(get_db)):
    """Database reachability, row counts and the analytics tuning in effect"""
    database = "healthy"
    counts = {}
    try:
        db.execute(text("SELECT 1"))
        counts = {
            "stores": db.query(Store).count(),
            "paid_orders": db.query(Order).filter(Order.is_paid.is_(True)).count(),
            "sales_goals": db.query(SalesGoal).count(),
        }
    except Exception as e:
        log.error(f"Database status check failed: {e}")
        database = "unavailable"

    return {
        "app_name": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "database": database,
        "counts": counts,
        "analytics": {
            "rfm_quantiles": settings.rfm_quantiles,
            "pace_tolerance": PACE_TOLERANCE,
            "ahead_margin": AHEAD_MARGIN,
        },
        "timestamp": datetime.utcnow().isoformat()
    }
