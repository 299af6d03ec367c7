# pm_workspace_core/pm_workspace/utils/periods.py
"""
Calendar bucket utilities for the roadmap timeline.
Supports quarterly, monthly, and ISO-weekly buckets and their period keys.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator
import re


@dataclass(frozen=True)
class PeriodWindow:
    """
    Represents a calendar bucket with start and end dates (end is inclusive).
    """
    start: date
    end: date  # inclusive

    def contains(self, dt: date) -> bool:
        """Check if a date falls within this period (inclusive)."""
        return self.start <= dt <= self.end


def parse_period_key(period_key: str) -> PeriodWindow:
    """
    Parse a period key string into a PeriodWindow.

    Supported formats:
    - Quarterly: "YYYY-QN" (e.g., "2026-Q1", "2026-Q4")
    - Monthly: "YYYY-MN" or "YYYY-MM" (e.g., "2026-M3", "2026-03")
    - Weekly: "YYYY-WN" or "YYYY-WNN", ISO week-numbering year (e.g., "2026-W5", "2026-W52")

    Raises:
        ValueError: If period_key format is not recognized or invalid
    """
    if not period_key or not isinstance(period_key, str):
        raise ValueError(f"Invalid period_key: must be a non-empty string, got {period_key!r}")

    period_key = period_key.strip().upper()

    quarterly_match = re.match(r"^(\d{4})-Q([1-4])$", period_key)
    if quarterly_match:
        year = int(quarterly_match.group(1))
        quarter = int(quarterly_match.group(2))
        _check_year(year)
        return quarter_window(date(year, (quarter - 1) * 3 + 1, 1))

    monthly_match = re.match(r"^(\d{4})-M?(\d{1,2})$", period_key)
    if monthly_match:
        year = int(monthly_match.group(1))
        month = int(monthly_match.group(2))
        if month < 1 or month > 12:
            raise ValueError(f"Invalid month in period_key '{period_key}': month must be 1-12")
        _check_year(year)
        return month_window(date(year, month, 1))

    weekly_match = re.match(r"^(\d{4})-W(\d{1,2})$", period_key)
    if weekly_match:
        year = int(weekly_match.group(1))
        week = int(weekly_match.group(2))
        _check_year(year)
        try:
            monday = date.fromisocalendar(year, week, 1)
        except ValueError as e:
            raise ValueError(f"Invalid week in period_key '{period_key}': {e}") from e
        return week_window(monday)

    raise ValueError(
        f"Unrecognized period_key format: '{period_key}'. "
        f"Supported formats: 'YYYY-QN' (quarters), 'YYYY-MN' (months), 'YYYY-WN' (weeks). "
        f"Examples: '2026-Q1', '2026-M3', '2026-03', '2026-W5'"
    )


def _check_year(year: int) -> None:
    if year < 1900 or year > 2100:
        raise ValueError(f"Invalid year {year}: must be between 1900 and 2100")


# ---------------------------------------------------------------------------
# Bucket boundaries
# ---------------------------------------------------------------------------

def start_of_week(d: date) -> date:
    """Monday of the ISO week containing d."""
    return d - timedelta(days=d.weekday())


def week_window(d: date) -> PeriodWindow:
    start = start_of_week(d)
    return PeriodWindow(start=start, end=start + timedelta(days=6))  # Sunday (inclusive)


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    idx = d.year * 12 + (d.month - 1) + months
    year, month0 = divmod(idx, 12)
    last_day = month_window(date(year, month0 + 1, 1)).end.day
    return date(year, month0 + 1, min(d.day, last_day))


def month_window(d: date) -> PeriodWindow:
    start = start_of_month(d)
    if start.month == 12:
        end = date(start.year, 12, 31)
    else:
        # first day of next month, then subtract 1 day
        end = date(start.year, start.month + 1, 1) - timedelta(days=1)
    return PeriodWindow(start=start, end=end)


def quarter_of(d: date) -> int:
    return (d.month - 1) // 3 + 1


def start_of_quarter(d: date) -> date:
    return date(d.year, (quarter_of(d) - 1) * 3 + 1, 1)


def quarter_window(d: date) -> PeriodWindow:
    start = start_of_quarter(d)
    last_month = month_window(date(start.year, start.month + 2, 1))
    return PeriodWindow(start=start, end=last_month.end)


# ---------------------------------------------------------------------------
# Enumeration over a date range (buckets fully or partially overlapping it)
# ---------------------------------------------------------------------------

def iter_weeks(start: date, end: date) -> Iterator[PeriodWindow]:
    cursor = start_of_week(start)
    while cursor <= end:
        yield week_window(cursor)
        cursor += timedelta(days=7)


def iter_months(start: date, end: date) -> Iterator[PeriodWindow]:
    cursor = start_of_month(start)
    while cursor <= end:
        yield month_window(cursor)
        cursor = add_months(cursor, 1)


def iter_quarters(start: date, end: date) -> Iterator[PeriodWindow]:
    cursor = start_of_quarter(start)
    while cursor <= end:
        yield quarter_window(cursor)
        cursor = add_months(cursor, 3)


def week_key(d: date) -> str:
    iso_year, iso_week, _ = d.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def month_key(d: date) -> str:
    return f"{d.year}-{d.month:02d}"


def quarter_key(d: date) -> str:
    return f"{d.year}-Q{quarter_of(d)}"


__all__ = [
    "PeriodWindow",
    "parse_period_key",
    "start_of_week",
    "week_window",
    "start_of_month",
    "add_months",
    "month_window",
    "quarter_of",
    "start_of_quarter",
    "quarter_window",
    "iter_weeks",
    "iter_months",
    "iter_quarters",
    "week_key",
    "month_key",
    "quarter_key",
]
