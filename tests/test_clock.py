"""
Date Utility Tests
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from journal_progress.clock import day_distance, is_weekend, month_key, to_date, today


class TestToDate:

    @pytest.mark.parametrize("value", [
        date(2024, 1, 1),
        datetime(2024, 1, 1, 23, 59),
        "2024-01-01",
        "2024-01-01T08:30:00",
    ])
    def test_normalizes(self, value):
        assert to_date(value) == date(2024, 1, 1)

    def test_aware_datetime_uses_local_date(self):
        aware = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=14)))
        assert to_date(aware) == aware.astimezone().date()
        assert to_date(aware.isoformat()) == aware.astimezone().date()

    def test_naive_datetime_taken_as_is(self):
        assert to_date(datetime(2024, 1, 1, 23, 59)) == date(2024, 1, 1)

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_date("yesterday")


class TestDayDistance:

    def test_same_day_ignores_time(self):
        assert day_distance("2024-01-01T00:01:00", "2024-01-01T23:59:00") == 0

    def test_forward_and_backward(self):
        assert day_distance("2024-01-01", "2024-01-02") == 1
        assert day_distance("2024-01-10", "2024-01-02") == -8

    def test_across_month_and_leap_day(self):
        assert day_distance("2024-02-28", "2024-03-01") == 2


def test_is_weekend():
    assert not is_weekend("2024-01-05")
    assert is_weekend("2024-01-06")
    assert is_weekend("2024-01-07")


def test_month_key():
    assert month_key(date(2024, 3, 9)) == "2024-03"
    assert month_key("2023-12-31") < month_key("2024-01-01")


def test_today_is_local_date():
    assert today() == date.today()
