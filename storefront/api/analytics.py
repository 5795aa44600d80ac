"""
Store Analytics API

RFM customer segmentation, product performance and sales by country for a
store the current user owns.
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.api.dependencies import get_order_repository, get_owned_store
from storefront.models.store import Store
from storefront.services.analytics_service import AnalyticsService
from storefront.services.order_repository import OrderRepository
from storefront.utils.logger import log

router = APIRouter(prefix="/stores/{store_id}/analytics", tags=["analytics"])


@router.get("/customer-segmentation")
async def get_customer_segmentation(
    store_id: str,
    store: Store = Depends(get_owned_store),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Customer counts per RFM segment, largest first."""
    try:
        return AnalyticsService(repo).get_customer_segmentation(store.id)
    except Exception as e:
        log.error(f"Customer segmentation failed for store {store_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/product-performance")
async def get_product_performance(
    store_id: str,
    store: Store = Depends(get_owned_store),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Revenue and units sold per product."""
    try:
        return AnalyticsService(repo).get_product_performance(store.id)
    except Exception as e:
        log.error(f"Product performance failed for store {store_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/sales-by-country")
async def get_sales_by_country(
    store_id: str,
    store: Store = Depends(get_owned_store),
    repo: OrderRepository = Depends(get_order_repository),
):
    """Paid order value and count per guessed shipping country."""
    try:
        return AnalyticsService(repo).get_sales_by_country(store.id)
    except Exception as e:
        log.error(f"Sales by country failed for store {store_id}: {e}")
        raise HTTPException(status_code=500, detail="Internal error")
