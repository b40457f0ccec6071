from datetime import datetime

import pytest

from kirana_admin.core.dates import DateRange, date_range_from_dates
from kirana_admin.data import analytics
from kirana_admin.data.models import AnalyticsData


JAN_5_TO_11 = date_range_from_dates(datetime(2024, 1, 5).date(), datetime(2024, 1, 11).date())


class TestPureAggregations:

    def test_growth_percentage(self):
        assert analytics.growth_percentage(150, 100) == pytest.approx(50.0)
        assert analytics.growth_percentage(50, 100) == pytest.approx(-50.0)
        assert analytics.growth_percentage(100, 0) == 0.0

    def test_top_category_by_quantity(self):
        items = analytics.build_items_frame(
            [
                {"order_id": "o1", "product_id": "p1", "quantity": 3, "price": 10},
                {"order_id": "o1", "product_id": "p2", "quantity": 1, "price": 500},
            ],
            [
                {"id": "p1", "name": "Salt", "category": "Staples"},
                {"id": "p2", "name": "Oil", "category": "Cooking"},
            ],
        )
        assert analytics.top_category(items) == "Staples"

    def test_top_category_empty(self):
        assert analytics.top_category(analytics.build_items_frame([], [])) == "N/A"

    def test_items_without_product_are_unknown(self):
        items = analytics.build_items_frame(
            [{"order_id": "o1", "product_id": "missing", "quantity": 2, "price": 15}],
            [],
        )
        row = items.iloc[0]
        assert row["name"] == "Unknown"
        assert row["category"] == "Unknown"
        assert row["revenue"] == pytest.approx(30.0)

    def test_daily_series_zero_fills(self):
        orders = analytics.build_orders_frame([
            {"id": "a", "customer_id": "c", "total_amount": 100, "created_at": "2024-01-05T09:00:00"},
            {"id": "b", "customer_id": "c", "total_amount": 50, "created_at": "2024-01-05T20:00:00"},
            {"id": "c", "customer_id": "d", "total_amount": 70, "created_at": "2024-01-07T08:00:00"},
        ])
        date_range = date_range_from_dates(datetime(2024, 1, 5).date(), datetime(2024, 1, 8).date())

        counts = analytics.build_daily_series(orders, date_range, "count")
        revenue = analytics.build_daily_series(orders, date_range, "revenue")

        assert [p.date for p in counts] == ["2024-01-05", "2024-01-06", "2024-01-07", "2024-01-08"]
        assert [p.value for p in counts] == [2, 0, 1, 0]
        assert [p.value for p in revenue] == [150.0, 0.0, 70.0, 0.0]
        assert counts[0].label == "Jan 5"

    def test_summarize_empty(self):
        data = analytics.summarize_orders(
            analytics.build_orders_frame([]),
            analytics.build_items_frame([], []),
        )
        assert data == AnalyticsData()

    def test_category_percentages_sum_to_100(self):
        items = analytics.build_items_frame(
            [
                {"order_id": "o1", "product_id": "p1", "quantity": 1, "price": 25},
                {"order_id": "o2", "product_id": "p2", "quantity": 3, "price": 25},
            ],
            [
                {"id": "p1", "name": "Tea", "category": "Beverages"},
                {"id": "p2", "name": "Dal", "category": "Pulses"},
            ],
        )
        breakdown = analytics.build_category_breakdown(items)
        assert [c.category for c in breakdown] == ["Pulses", "Beverages"]
        assert sum(c.percentage for c in breakdown) == pytest.approx(100.0)
        assert breakdown[0].percentage == pytest.approx(75.0)

    def test_items_without_product_id_are_excluded_everywhere(self):
        items = analytics.build_items_frame(
            [
                {"order_id": "o1", "product_id": "p1", "quantity": 2, "price": 50},
                {"order_id": "o2", "product_id": None, "quantity": 1, "price": 10000},
            ],
            [{"id": "p1", "name": "Tea", "category": "Beverages"}],
        )

        assert len(items) == 1
        assert [p.id for p in analytics.build_top_products(items)] == ["p1"]
        breakdown = analytics.build_category_breakdown(items)
        assert [c.category for c in breakdown] == ["Beverages"]
        assert breakdown[0].total_revenue == pytest.approx(100.0)
        assert analytics.top_category(items) == "Beverages"


class TestReportRange:

    def test_daily(self):
        r = analytics.report_range("daily", datetime(2024, 1, 10, 15, 30))
        assert r.start == datetime(2024, 1, 10)
        assert r.end == datetime(2024, 1, 10, 23, 59, 59)

    def test_weekly_starts_on_sunday(self):
        now = datetime(2024, 1, 10, 12, 0)  # Wednesday
        r = analytics.report_range("weekly", now)
        assert r.start == datetime(2024, 1, 7)
        assert r.end == now

    def test_weekly_on_sunday_is_same_day(self):
        now = datetime(2024, 1, 7, 9, 0)
        assert analytics.report_range("weekly", now).start == datetime(2024, 1, 7)

    def test_monthly(self):
        now = datetime(2024, 2, 20, 8, 0)
        r = analytics.report_range("monthly", now)
        assert r.start == datetime(2024, 2, 1)
        assert r.end == now

    def test_unknown_period(self):
        with pytest.raises(ValueError):
            analytics.report_range("yearly")


class TestBackendAnalytics:

    def test_analytics_data(self, client):
        data = analytics.get_analytics_data(client, JAN_5_TO_11)

        assert data.total_orders == 3
        assert data.total_revenue == pytest.approx(1000.0)
        assert data.total_customers == 2
        assert data.average_order_value == pytest.approx(1000.0 / 3)
        assert data.growth_percentage == 0.0
        assert data.top_category == "Dairy"

    def test_growth_against_previous_window(self, client):
        client.tables["orders"].append({
            "id": "order-old", "customer_id": "cust-1", "store_id": "store-1",
            "status": "delivered", "total_amount": 500.0,
            "created_at": "2024-01-01T10:00:00",
        })
        data = analytics.get_analytics_data(client, JAN_5_TO_11)
        assert data.growth_percentage == pytest.approx(100.0)

    def test_analytics_errors_give_zeroes(self, client):
        client.fail("orders")
        assert analytics.get_analytics_data(client, JAN_5_TO_11) == AnalyticsData()

    def test_trends(self, client):
        orders = analytics.get_order_trends(client, JAN_5_TO_11)
        revenue = analytics.get_revenue_trends(client, JAN_5_TO_11)

        assert len(orders) == 7
        assert [p.value for p in orders] == [1, 1, 1, 0, 0, 0, 0]
        assert [p.value for p in revenue][:3] == [300.0, 150.0, 550.0]

    def test_trends_error_gives_empty_list(self, client):
        client.fail("orders")
        assert analytics.get_order_trends(client, JAN_5_TO_11) == []

    def test_top_products(self, client):
        top = analytics.get_top_products(client, JAN_5_TO_11, limit=2)

        assert [p.name for p in top] == ["Desi Ghee", "Basmati Rice"]
        assert top[0].total_revenue == pytest.approx(550.0)
        assert top[1].total_sales == 2

    def test_top_products_counts_line_items(self, client):
        top = analytics.get_top_products(client, JAN_5_TO_11, limit=5)
        milk = next(p for p in top if p.id == "prod-milk")
        assert milk.total_sales == 7
        assert milk.order_count == 2
        assert milk.total_revenue == pytest.approx(210.0)

    def test_category_breakdown(self, client):
        breakdown = analytics.get_category_breakdown(client, JAN_5_TO_11)

        assert [c.category for c in breakdown] == ["Dairy", "Grains"]
        assert breakdown[0].total_revenue == pytest.approx(760.0)
        assert breakdown[0].percentage == pytest.approx(76.0)
        assert breakdown[1].percentage == pytest.approx(24.0)

    def test_no_store_gives_empty(self, anonymous_client):
        assert analytics.get_top_products(anonymous_client, JAN_5_TO_11) == []
        assert analytics.get_category_breakdown(anonymous_client, JAN_5_TO_11) == []


class TestReports:

    def test_weekly_report(self, client):
        report = analytics.get_report_data(client, "weekly", now=datetime(2024, 1, 10, 12, 0))

        assert report.period == "weekly"
        assert report.start_date == "2024-01-07"
        assert report.end_date == "2024-01-10"
        assert report.summary.total_orders == 1
        assert report.summary.total_revenue == pytest.approx(550.0)
        assert len(report.order_trends) == 4
        assert report.top_products[0].name == "Desi Ghee"

    def test_monthly_report(self, client):
        report = analytics.get_report_data(client, "monthly", now=datetime(2024, 1, 31, 20, 0))

        assert report.start_date == "2024-01-01"
        assert report.summary.total_orders == 3
        assert report.summary.total_customers == 2
        assert len(report.revenue_trends) == 31

    def test_report_raises_on_backend_error(self, client):
        client.fail("orders")
        with pytest.raises(RuntimeError):
            analytics.get_report_data(client, "daily", now=datetime(2024, 1, 6, 15, 0))

    def test_previous_range_has_same_length(self):
        r = DateRange(datetime(2024, 1, 8), datetime(2024, 1, 14, 23, 59, 59, 999000))
        previous = r.previous()
        assert previous.start == datetime(2024, 1, 1)
        assert previous.end == datetime(2024, 1, 7, 23, 59, 59, 999000)
