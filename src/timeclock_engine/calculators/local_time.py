"""Calendar-day helpers for the display zone.

Timestamps are stored in UTC; "today", "this year" and daily buckets are
local calendar days of the display zone.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime. Naive input is taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def local_date(value: datetime, zone: tzinfo) -> date:
    """Calendar date of a timestamp in the display zone."""
    return as_utc(value).astimezone(zone).date()


def local_midnight(day: date, zone: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=zone)


def day_bounds(day: date, zone: tzinfo) -> tuple[datetime, datetime]:
    """UTC [start, end) of a local calendar day."""
    start = local_midnight(day, zone)
    end = local_midnight(day + timedelta(days=1), zone)
    return as_utc(start), as_utc(end)


def range_bounds(start_day: date, end_day: date, zone: tzinfo) -> tuple[datetime, datetime]:
    """UTC [start, end) covering local days start_day..end_day inclusive."""
    if end_day < start_day:
        raise ValueError("end date precedes start date")
    return day_bounds(start_day, zone)[0], day_bounds(end_day, zone)[1]


def year_start(day: date) -> date:
    return date(day.year, 1, 1)
