from datetime import date, datetime, timedelta

import numpy as np
import pytest

from kirana_admin.core import dates
from kirana_admin.core.utils import (
    display_phone_number,
    format_currency,
    format_phone_number,
    humanize_status,
    is_valid_indian_phone,
    make_json_serializable,
    parse_timestamp,
)


class TestPhoneNumbers:

    @pytest.mark.parametrize("raw, expected", [
        ("9876543210", "+919876543210"),
        ("98765 43210", "+919876543210"),
        ("919876543210", "+919876543210"),
        ("+91 98765-43210", "+919876543210"),
        ("09876543210", "+919876543210"),
        ("+14155550100", "+14155550100"),
        ("", ""),
    ])
    def test_format(self, raw, expected):
        assert format_phone_number(raw) == expected

    def test_display(self):
        assert display_phone_number("+919876543210") == "+91 98765 43210"
        assert display_phone_number("12345") == "12345"
        assert display_phone_number("") == ""

    def test_validity(self):
        assert is_valid_indian_phone("9876543210")
        assert is_valid_indian_phone("+91 98765 43210")
        assert not is_valid_indian_phone("5876543210")
        assert not is_valid_indian_phone("98765")
        assert not is_valid_indian_phone(None)


def test_format_currency():
    assert format_currency(1234.5) == "₹1,234.50"
    assert format_currency(None) == "₹0.00"
    assert format_currency(-20) == "-₹20.00"


def test_humanize_status():
    assert humanize_status("out_for_delivery") == "out for delivery"
    assert humanize_status(None) == ""


class TestSerialization:

    def test_numpy_and_dates(self):
        assert make_json_serializable({
            "count": np.int64(3),
            "revenue": np.float64(1.5),
            "day": date(2024, 1, 5),
            "values": np.array([1, 2]),
        }) == {"count": 3, "revenue": 1.5, "day": "2024-01-05", "values": [1, 2]}

    def test_missing_values(self):
        assert make_json_serializable([float("nan"), None, "x"]) == [None, None, "x"]


class TestParseTimestamp:

    def test_naive_string(self):
        assert parse_timestamp("2024-01-05T10:00:00") == datetime(2024, 1, 5, 10, 0)

    def test_aware_string_becomes_naive(self):
        assert parse_timestamp("2024-01-05T10:00:00+00:00").tzinfo is None

    def test_empty_and_garbage(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None
        assert parse_timestamp("not a date") is None


class TestDates:

    NOW = datetime(2024, 1, 10, 15, 30)  # a Wednesday

    def test_last_7_days(self):
        r = dates.last_7_days(self.NOW)
        assert r.start == datetime(2024, 1, 4)
        assert r.end.date() == date(2024, 1, 10)
        assert len(list(r.days())) == 7

    def test_this_week_starts_monday(self):
        r = dates.this_week(self.NOW)
        assert r.start == datetime(2024, 1, 8)
        assert r.end.date() == date(2024, 1, 14)

    def test_this_month_december(self):
        r = dates.this_month(datetime(2023, 12, 15))
        assert r.start == datetime(2023, 12, 1)
        assert r.end.date() == date(2023, 12, 31)

    def test_formatting(self):
        r = dates.date_range_from_dates(date(2024, 1, 5), date(2024, 1, 11))
        assert dates.format_date_range(r) == "Jan 5, 2024 - Jan 11, 2024"
        assert dates.format_day_label(r.start) == "Jan 5"
        assert dates.format_timestamp(datetime(2024, 1, 5, 14, 30)) == "Jan 5, 2024 14:30"
        assert dates.format_timestamp(None) == ""

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(seconds=30), "less than a minute ago"),
        (timedelta(seconds=90), "1 minute ago"),
        (timedelta(minutes=45), "45 minutes ago"),
        (timedelta(hours=2, minutes=5), "2 hours ago"),
        (timedelta(days=1, hours=3), "1 day ago"),
        (timedelta(days=3), "3 days ago"),
    ])
    def test_time_ago(self, delta, expected):
        assert dates.time_ago(self.NOW - delta, now=self.NOW) == expected
