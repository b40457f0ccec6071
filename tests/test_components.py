from datetime import date, datetime, time

from kirana_admin.data import orders
from kirana_admin.data.models import StatusHistoryEntry
from kirana_admin.ui.components import bell_label, timeline_lines
from kirana_admin.ui.pages.orders import ALL_STATUSES, NO_DATE_RANGE, build_filters
from kirana_admin.ui.pages.settings import parse_time


def test_timeline_lines():
    history = [
        StatusHistoryEntry(
            id="h2", to_status="out_for_delivery", from_status="confirmed",
            created_at="2024-01-05T12:00:00", changed_by_name="Ravi Sharma",
            notes="Rider assigned",
        ),
        StatusHistoryEntry(id="h1", to_status="pending", created_at="2024-01-05T09:00:00"),
    ]

    lines = timeline_lines(history, now=datetime(2024, 1, 5, 12, 30))

    assert lines[0]["title"] == "out for delivery"
    assert lines[0]["from_status"] == "confirmed"
    assert lines[0]["when"] == "30 minutes ago"
    assert lines[0]["by"] == "by Ravi Sharma"
    assert lines[0]["notes"] == "Rider assigned"
    assert lines[1]["from_status"] is None
    assert lines[1]["by"] == ""
    assert lines[1]["when"] == "3 hours ago"


def test_bell_label():
    assert bell_label(0) == "🔔"
    assert bell_label(4) == "🔔 4"
    assert bell_label(12) == "🔔 9+"


class TestOrderFilters:

    def test_all_statuses_and_blank_search(self):
        filters = build_filters(ALL_STATUSES, "  ", ())
        assert filters.status is None
        assert filters.search_query is None
        assert filters.date_from is None and filters.date_to is None

    def test_default_range_lists_every_order(self, client):
        filters = build_filters(ALL_STATUSES, "", NO_DATE_RANGE)

        assert filters.date_from is None and filters.date_to is None
        assert {o.id for o in orders.get_orders(client, filters)} == {"order-1", "order-2", "order-3"}

    def test_date_range_covers_whole_days(self):
        filters = build_filters("pending", " KW10 ", (date(2024, 1, 5), date(2024, 1, 6)))
        assert filters.status == "pending"
        assert filters.search_query == "KW10"
        assert filters.date_from == "2024-01-05"
        assert filters.date_to == "2024-01-06T23:59:59"

    def test_half_picked_range_is_ignored(self):
        filters = build_filters(ALL_STATUSES, "", (date(2024, 1, 5),))
        assert filters.date_from is None


def test_parse_time():
    default = time(9, 0)
    assert parse_time("07:30", default) == time(7, 30)
    assert parse_time("21:00:00", default) == time(21, 0)
    assert parse_time(None, default) == default
    assert parse_time("late", default) == default
