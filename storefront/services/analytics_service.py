"""
Store Analytics Service

Customer segmentation, product performance and sales by country, computed
on the fly from a store's paid orders.
"""
import logging
import re
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional

from storefront.config import get_settings
from storefront.services.order_repository import OrderRepository
from storefront.services.rfm_segmentation import segment_customers

logger = logging.getLogger(__name__)

_US_ZIP = re.compile(r"\b\d{5}(-\d{4})?\b")
_CA_POSTAL = re.compile(r"\b[a-z]\d[a-z][ -]?\d[a-z]\d\b", re.IGNORECASE)
_ADDRESS_SPLIT = re.compile(r",|\n")

KNOWN_COUNTRIES = {
    "usa": "USA",
    "united states": "USA",
    "canada": "Canada",
    "uk": "United Kingdom",
    "united kingdom": "United Kingdom",
    "australia": "Australia",
    "germany": "Germany",
    "france": "France",
}


def guess_country_from_address(address: Optional[str]) -> Optional[str]:
    """
    Best-effort country from a free-text address, or None.

    Looks only at the last comma/newline separated part. Postcodes are
    read as a country hint (US ZIP, Canadian postal code).
    """
    if not address or not isinstance(address, str):
        return None
    parts = [p.strip() for p in _ADDRESS_SPLIT.split(address.lower())]
    parts = [p for p in parts if p]
    if not parts:
        return None
    last = parts[-1]

    if last in ("usa", "united states") or _US_ZIP.search(last):
        return "USA"
    if last == "canada" or _CA_POSTAL.search(last):
        return "Canada"
    if last in KNOWN_COUNTRIES:
        return KNOWN_COUNTRIES[last]

    if last.isdigit():
        return None
    if len(last) <= 3:
        return None

    return " ".join(word[:1].upper() + word[1:] for word in last.split(" "))


class AnalyticsService:
    def __init__(self, repo: OrderRepository):
        self.repo = repo

    def get_customer_segmentation(self, store_id: str, now: Optional[datetime] = None) -> List[dict]:
        """RFM segment counts for customers with at least one paid order."""
        orders = self.repo.list_paid_orders(store_id, customers_only=True)
        return segment_customers(orders, now=now, quantiles=get_settings().rfm_quantiles)

    def get_product_performance(self, store_id: str) -> List[dict]:
        """Revenue and units sold per product across all paid orders."""
        performance: Dict[str, dict] = {}
        for order in self.repo.list_paid_orders(store_id):
            for item in order.line_items:
                row = performance.setdefault(item.product_id, {
                    "id": item.product_id,
                    "name": item.product_name,
                    "totalRevenue": 0.0,
                    "totalUnitsSold": 0,
                })
                row["totalRevenue"] += item.unit_price
                row["totalUnitsSold"] += 1
        return list(performance.values())

    def get_sales_by_country(self, store_id: str) -> List[dict]:
        """Order value and count per guessed country. Unplaceable addresses are left out."""
        by_country = defaultdict(lambda: {"totalSalesValue": 0.0, "orderCount": 0})
        skipped = 0
        for order in self.repo.list_paid_orders(store_id):
            country = guess_country_from_address(order.address)
            if not country:
                skipped += 1
                continue
            by_country[country]["totalSalesValue"] += order.total
            by_country[country]["orderCount"] += 1

        if skipped:
            logger.debug(f"Store {store_id}: {skipped} paid orders with no guessable country")
        return [{"country": country, **data} for country, data in by_country.items()]
