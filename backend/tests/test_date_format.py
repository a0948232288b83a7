from datetime import datetime

import pytest

from services.date_format import (
    format_album_date,
    format_date,
    format_date_range,
    format_date_time,
    has_time_component,
    parse_album_date,
    to_date_only,
)


def test_has_time_component():
    assert has_time_component("2024-03-01T14:30")
    assert not has_time_component("2024-03-01")
    assert not has_time_component("")


def test_to_date_only():
    assert to_date_only("2024-03-01T14:30:00") == "2024-03-01"
    assert to_date_only("2024-03-01") == "2024-03-01"


def test_parse_album_date():
    assert parse_album_date("2024-03-01") == datetime(2024, 3, 1)
    assert parse_album_date("2024-03-01T14:30:00") == datetime(2024, 3, 1, 14, 30)
    assert parse_album_date("2024-03-01T14:30:00Z") == datetime(2024, 3, 1, 14, 30)
    with pytest.raises(ValueError):
        parse_album_date("yesterday")


def test_parse_album_date_fraction_and_offset():
    assert parse_album_date("2024-03-01T14:30:00.5") == datetime(2024, 3, 1, 14, 30, 0, 500000)
    assert parse_album_date("2024-03-01T14:30:00.1234567") == datetime(2024, 3, 1, 14, 30, 0, 123456)
    assert parse_album_date("2024-03-01T14:30:00+09:00") == datetime(2024, 3, 1, 14, 30)
    assert parse_album_date("2024-03-01T14:30:00+09:00", as_utc=True) == datetime(2024, 3, 1, 5, 30)
    assert parse_album_date("2024-03-01T14:30:00Z", as_utc=True) == datetime(2024, 3, 1, 14, 30)


def test_format_date():
    assert format_date("2024-03-01") == "March 1, 2024 (Fri)"


def test_format_date_time_uses_twelve_hour_clock():
    assert format_date_time("2024-03-01T14:05") == "March 1, 2024 (Fri) 2:05 PM"
    assert format_date_time("2024-03-01T00:30") == "March 1, 2024 (Fri) 12:30 AM"
    assert format_date_time("2024-03-01T12:00") == "March 1, 2024 (Fri) 12:00 PM"


class TestFormatDateRange:
    def test_same_month(self):
        assert format_date_range("2024-01-15", "2024-01-17") == "January 15 ~ 17, 2024"

    def test_same_year(self):
        assert format_date_range("2024-01-30", "2024-02-02") == "January 30 ~ February 2, 2024"

    def test_across_years(self):
        assert format_date_range("2023-12-30", "2024-01-02") == "December 30, 2023 ~ January 2, 2024"


class TestFormatAlbumDate:
    def test_range_when_end_differs(self):
        assert format_album_date("2024-01-15", "2024-01-17") == "January 15 ~ 17, 2024"

    def test_single_when_end_equals_start(self):
        assert format_album_date("2024-01-15", "2024-01-15") == "January 15, 2024 (Mon)"

    def test_single_when_end_absent(self):
        assert format_album_date("2024-01-15") == "January 15, 2024 (Mon)"

    def test_time_suffix_only_with_time_component(self):
        assert format_album_date("2024-01-15T09:07") == "January 15, 2024 (Mon) 9:07 AM"
        assert format_album_date("2024-01-15T09:07", "2024-01-15") == "January 15, 2024 (Mon) 9:07 AM"

    def test_range_ignores_time_of_start(self):
        assert format_album_date("2024-01-15T09:07", "2024-01-16") == "January 15 ~ 16, 2024"
