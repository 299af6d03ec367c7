# pm_workspace_core/pm_workspace/utils/dates.py
"""
Calendar-date helpers shared by the timeline services.

Dates travel as ``YYYY-MM-DD`` strings (local calendar days) and as epoch
milliseconds at local midnight. Parsing is lenient by contract: a corrupt
date string degrades to "now" instead of raising, so one bad record only
misplaces a bar rather than breaking the whole render.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
import re
import time
from typing import Optional

DAY_MS = 86_400_000

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """Parse a strict ``YYYY-MM-DD`` string. Returns None when invalid."""
    if not date_str or not isinstance(date_str, str):
        return None
    match = _DATE_RE.match(date_str.strip())
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        # e.g. 2026-02-30
        return None


def is_valid_date_string(date_str: Optional[str]) -> bool:
    return parse_date(date_str) is not None


def date_to_ms(d: date) -> int:
    """Local midnight of ``d`` as epoch milliseconds."""
    return int(datetime(d.year, d.month, d.day).timestamp() * 1000)


def ms_to_date(ms: int) -> date:
    return datetime.fromtimestamp(ms / 1000).date()


def date_string_to_ms(date_str: Optional[str]) -> int:
    """``YYYY-MM-DD`` -> local-midnight timestamp; falls back to the current time."""
    d = parse_date(date_str)
    if d is None:
        return now_ms()
    return date_to_ms(d)


def ms_to_date_string(ms: int) -> str:
    return ms_to_date(ms).strftime("%Y-%m-%d")


def format_date(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def today_date(today: Optional[date] = None) -> date:
    return today if today is not None else date.today()


def shift_date_string(date_str: str, days: int) -> str:
    """Move a calendar date by whole days; invalid input shifts from today."""
    d = parse_date(date_str) or date.today()
    return format_date(d + timedelta(days=days))


__all__ = [
    "DAY_MS",
    "now_ms",
    "parse_date",
    "is_valid_date_string",
    "date_to_ms",
    "ms_to_date",
    "date_string_to_ms",
    "ms_to_date_string",
    "format_date",
    "today_date",
    "shift_date_string",
]
