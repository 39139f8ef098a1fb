"""Symbolic date-range resolution (no remote access)."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

from gads_mcp.errors import InvalidRange, MissingCustomBounds
from gads_mcp.schemas.common import DateRange


def _trailing(days: int) -> Callable[[date], tuple[date, date]]:
    # start is `days` before today and today is included, so the window
    # covers days + 1 calendar dates.
    return lambda today: (today - timedelta(days=days), today)


def _last_month(today: date) -> tuple[date, date]:
    end = today.replace(day=1) - timedelta(days=1)
    return end.replace(day=1), end


_PRESETS: dict[str, Callable[[date], tuple[date, date]]] = {
    "TODAY": lambda today: (today, today),
    "YESTERDAY": lambda today: (today - timedelta(days=1), today - timedelta(days=1)),
    "LAST_7_DAYS": _trailing(7),
    "LAST_14_DAYS": _trailing(14),
    "LAST_30_DAYS": _trailing(30),
    "LAST_90_DAYS": _trailing(90),
    "THIS_MONTH": lambda today: (today.replace(day=1), today),
    "LAST_MONTH": _last_month,
}

DATE_RANGES: tuple[str, ...] = (*_PRESETS, "CUSTOM")


def parse_calendar_date(value: str, field: str) -> date:
    """Parse ``YYYY-MM-DD`` from its three integer components.

    The string is never handed to a timestamp parser, so no UTC offset can
    shift the day.
    """
    parts = str(value).split("-")
    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        raise InvalidRange(f"Invalid {field}: {value}. Expected YYYY-MM-DD") from None


def resolve_date_range(
    range_name: str | None,
    start_date: str | None = None,
    end_date: str | None = None,
    *,
    today: date | None = None,
) -> DateRange:
    """Map a symbolic range name to concrete start/end dates.

    Args:
        range_name: One of ``DATE_RANGES``.  Matching is case-sensitive.
        start_date: Inclusive start, required for ``CUSTOM``.
        end_date: Inclusive end, required for ``CUSTOM``.
        today: Reference date; defaults to the local calendar date.

    Raises:
        InvalidRange: unknown range name, malformed bounds, or start after end.
        MissingCustomBounds: ``CUSTOM`` without both bounds.
    """
    if range_name not in DATE_RANGES:
        raise InvalidRange(
            f"Invalid date_range: {range_name}. Allowed values: {', '.join(DATE_RANGES)}"
        )

    if range_name == "CUSTOM":
        if not start_date or not end_date:
            raise MissingCustomBounds()
        start = parse_calendar_date(start_date, "start_date")
        end = parse_calendar_date(end_date, "end_date")
        if start > end:
            raise InvalidRange(f"Invalid date range: start_date {start} is after end_date {end}")
    else:
        start, end = _PRESETS[range_name](today or date.today())

    return DateRange(start=start.isoformat(), end=end.isoformat())
