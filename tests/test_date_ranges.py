"""Tests for symbolic date-range resolution."""

from __future__ import annotations

from datetime import date

import pytest

from gads_mcp.errors import InvalidRange, MissingCustomBounds
from gads_mcp.services.date_ranges import DATE_RANGES, parse_calendar_date, resolve_date_range

TODAY = date(2024, 3, 15)


@pytest.mark.parametrize(
    "name,start,end",
    [
        ("TODAY", "2024-03-15", "2024-03-15"),
        ("YESTERDAY", "2024-03-14", "2024-03-14"),
        ("LAST_7_DAYS", "2024-03-08", "2024-03-15"),
        ("LAST_14_DAYS", "2024-03-01", "2024-03-15"),
        ("LAST_30_DAYS", "2024-02-14", "2024-03-15"),
        ("LAST_90_DAYS", "2023-12-16", "2024-03-15"),
        ("THIS_MONTH", "2024-03-01", "2024-03-15"),
        ("LAST_MONTH", "2024-02-01", "2024-02-29"),
    ],
)
def test_presets(name, start, end):
    rng = resolve_date_range(name, today=TODAY)
    assert (rng.start, rng.end) == (start, end)


def test_last_7_days_spans_seven_days():
    rng = resolve_date_range("LAST_7_DAYS")
    delta = date.fromisoformat(rng.end) - date.fromisoformat(rng.start)
    assert delta.days == 7


def test_last_month_in_january_rolls_back_a_year():
    rng = resolve_date_range("LAST_MONTH", today=date(2024, 1, 10))
    assert (rng.start, rng.end) == ("2023-12-01", "2023-12-31")


def test_custom_round_trips_exactly():
    rng = resolve_date_range("CUSTOM", "2024-01-01", "2024-01-31")
    assert rng.start == "2024-01-01"
    assert rng.end == "2024-01-31"


def test_custom_single_day():
    rng = resolve_date_range("CUSTOM", "2024-06-30", "2024-06-30")
    assert rng.start == rng.end == "2024-06-30"


@pytest.mark.parametrize("start,end", [(None, "2024-01-31"), ("2024-01-01", None), ("", "")])
def test_custom_without_bounds(start, end):
    with pytest.raises(MissingCustomBounds, match="start_date and end_date required"):
        resolve_date_range("CUSTOM", start, end)


def test_custom_start_after_end():
    with pytest.raises(InvalidRange, match="after end_date"):
        resolve_date_range("CUSTOM", "2024-02-01", "2024-01-01")


def test_custom_malformed_date():
    with pytest.raises(InvalidRange, match="Invalid start_date: 2024-13-01"):
        resolve_date_range("CUSTOM", "2024-13-01", "2024-12-31")


@pytest.mark.parametrize("name", ["last_7_days", "LAST_8_DAYS", None, ""])
def test_unknown_range_lists_allowed_values(name):
    with pytest.raises(InvalidRange) as exc_info:
        resolve_date_range(name)
    message = str(exc_info.value)
    assert message.startswith("Invalid date_range:")
    for allowed in DATE_RANGES:
        assert allowed in message


def test_parse_calendar_date_is_offset_free():
    assert parse_calendar_date("2024-01-01", "start_date") == date(2024, 1, 1)


def test_parse_calendar_date_rejects_garbage():
    with pytest.raises(InvalidRange, match="Expected YYYY-MM-DD"):
        parse_calendar_date("yesterday", "end_date")
