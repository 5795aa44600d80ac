"""
Product performance and sales-by-country tests.

Runs AnalyticsService over an in-memory repository.
"""
from datetime import timedelta

import pytest

from storefront.services.analytics_service import AnalyticsService, guess_country_from_address
from storefront.services.order_repository import LineItem, PaidOrder
from tests.conftest import FIXED_NOW, InMemoryOrderRepository, paid_order


# ---------------------------------------------------------------------------
# Country guessing
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("address, expected", [
    ("1 Main St, Springfield, IL, USA", "USA"),
    ("1 Main St, Springfield, United States", "USA"),
    ("1 Main St, Beverly Hills, CA 90210", "USA"),
    ("1 Main St, Austin, 78701-1234", "USA"),
    ("12 Maple Ave, Toronto, ON M5V 2T6", "Canada"),
    ("12 Maple Ave, Toronto, Canada", "Canada"),
    ("221B Baker St, London, UK", "United Kingdom"),
    ("221B Baker St, London, United Kingdom", "United Kingdom"),
    ("1 George St\nSydney\nAustralia", "Australia"),
    ("Hauptstr. 1, Berlin, Germany", "Germany"),
    ("1 Rue de Rivoli, Paris, France", "France"),
    ("Via Roma 1, Milano, italy", "Italy"),
    ("Calle 1, Ciudad de Mexico, new zealand", "New Zealand"),
])
def test_guess_country(address, expected):
    assert guess_country_from_address(address) == expected


@pytest.mark.parametrize("address", [
    "",
    None,
    " , ,\n",
    "1 Main St, Springfield, 1234",
    "1 Main St, Springfield, NY",
    "1 Main St, Springfield, de",
])
def test_guess_country_unknown(address):
    assert guess_country_from_address(address) is None


def test_guess_country_uses_last_part_only():
    assert guess_country_from_address("Paris, France, Spain") == "Spain"


# ---------------------------------------------------------------------------
# AnalyticsService
# ---------------------------------------------------------------------------

class TestProductPerformance:

    def test_aggregates_per_product(self):
        orders = [
            PaidOrder(id="o1", created_at=FIXED_NOW, line_items=[
                LineItem("tee", "Tee", 20.0), LineItem("tee", "Tee", 20.0), LineItem("cap", "Cap", 12.5),
            ]),
            PaidOrder(id="o2", created_at=FIXED_NOW, line_items=[LineItem("tee", "Tee", 20.0)]),
        ]
        result = AnalyticsService(InMemoryOrderRepository(orders)).get_product_performance("s1")

        assert result == [
            {"id": "tee", "name": "Tee", "totalRevenue": pytest.approx(60.0), "totalUnitsSold": 3},
            {"id": "cap", "name": "Cap", "totalRevenue": pytest.approx(12.5), "totalUnitsSold": 1},
        ]

    def test_no_orders(self):
        assert AnalyticsService(InMemoryOrderRepository()).get_product_performance("s1") == []


class TestSalesByCountry:

    def test_groups_by_guessed_country(self):
        orders = [
            paid_order(FIXED_NOW, [10.0, 5.0], address="1 Main St, Austin, TX 78701"),
            paid_order(FIXED_NOW, [20.0], address="2 Elm St, Boston, USA"),
            paid_order(FIXED_NOW, [7.0], address="Hauptstr. 1, Berlin, Germany"),
            paid_order(FIXED_NOW, [99.0], address=""),
            paid_order(FIXED_NOW, [99.0], address="somewhere, NY"),
        ]
        result = AnalyticsService(InMemoryOrderRepository(orders)).get_sales_by_country("s1")

        by_country = {r["country"]: r for r in result}
        assert set(by_country) == {"USA", "Germany"}
        assert by_country["USA"]["totalSalesValue"] == pytest.approx(35.0)
        assert by_country["USA"]["orderCount"] == 2
        assert by_country["Germany"]["orderCount"] == 1


class TestCustomerSegmentation:

    def test_requests_customer_orders_only(self):
        repo = InMemoryOrderRepository([
            paid_order(FIXED_NOW - timedelta(days=1), [10.0], customer_id="c1"),
            paid_order(FIXED_NOW - timedelta(days=1), [10.0]),
        ])
        result = AnalyticsService(repo).get_customer_segmentation("s1", now=FIXED_NOW)

        assert repo.calls == [("s1", None, None, True)]
        assert sum(r["customerCount"] for r in result) == 1

    def test_empty_store(self):
        assert AnalyticsService(InMemoryOrderRepository()).get_customer_segmentation("s1") == []
