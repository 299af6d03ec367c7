# pm_workspace_core/pm_workspace/services/timeline/time_scale.py
"""
Time-scale selection and initial visible ranges.

Two independent rules:
- best_time_scale looks at the spread of item dates and picks the default
  scale when a roadmap is first opened.
- effective_time_scale looks at the width of the visible range and drives
  live column density while the user pans and zooms.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

from pm_workspace.schemas.roadmap import RoadmapItem, TimeScale, VisibleRange
from pm_workspace.utils.dates import DAY_MS, date_to_ms, now_ms, parse_date, today_date
from pm_workspace.utils.periods import add_months, month_window, start_of_month, start_of_week, week_window

# Upper bounds (inclusive) in days
BEST_SCALE_WEEKLY_MAX_DAYS = 56
BEST_SCALE_MONTHLY_MAX_DAYS = 180
EFFECTIVE_SCALE_WEEKLY_MAX_DAYS = 90
EFFECTIVE_SCALE_MONTHLY_MAX_DAYS = 365


def best_time_scale(items: Sequence[RoadmapItem], today: Optional[date] = None) -> TimeScale:
    if not items:
        return TimeScale.WEEKLY

    # calendar-day difference, so DST shifts cannot nudge a boundary spread
    earliest, latest = _item_date_bounds(items, today_date(today))
    span_days = (latest - earliest).days

    if span_days <= BEST_SCALE_WEEKLY_MAX_DAYS:
        return TimeScale.WEEKLY
    if span_days <= BEST_SCALE_MONTHLY_MAX_DAYS:
        return TimeScale.MONTHLY
    return TimeScale.QUARTERLY


def effective_time_scale(visible_range: VisibleRange) -> TimeScale:
    span_days = visible_range.width_ms / DAY_MS
    if span_days <= EFFECTIVE_SCALE_WEEKLY_MAX_DAYS:
        return TimeScale.WEEKLY
    if span_days <= EFFECTIVE_SCALE_MONTHLY_MAX_DAYS:
        return TimeScale.MONTHLY
    return TimeScale.QUARTERLY


def _item_date_bounds(items: Sequence[RoadmapItem], today: date) -> Tuple[date, date]:
    dates: List[date] = []
    for it in items:
        dates.append(parse_date(it.start_date) or today)
        dates.append(parse_date(it.end_date) or today)
    return min(dates), max(dates)


def compute_time_range(
    items: Sequence[RoadmapItem],
    scale: Optional[TimeScale] = None,
    today: Optional[date] = None,
) -> Tuple[date, date]:
    """Padded calendar window covering all items (inclusive dates).

    Weekly: two weeks of padding each side, snapped to Monday..Sunday.
    Otherwise: one month of padding each side, snapped to month bounds.
    Empty roadmaps get a window around today.
    """
    now = today_date(today)
    if scale == TimeScale.WEEKLY:
        if not items:
            return start_of_week(now - timedelta(weeks=2)), week_window(now + timedelta(weeks=5)).end
        earliest, latest = _item_date_bounds(items, now)
        return start_of_week(earliest - timedelta(weeks=2)), week_window(latest + timedelta(weeks=2)).end

    if not items:
        return start_of_month(add_months(now, -1)), month_window(add_months(now, 5)).end
    earliest, latest = _item_date_bounds(items, now)
    return start_of_month(add_months(earliest, -1)), month_window(add_months(latest, 1)).end


def compute_initial_range(
    items: Sequence[RoadmapItem],
    scale: Optional[TimeScale] = None,
    today: Optional[date] = None,
) -> VisibleRange:
    start, end = compute_time_range(items, scale, today)
    return VisibleRange(start=date_to_ms(start), end=date_to_ms(end))


def range_for_scale(scale: TimeScale, center_ms: Optional[int] = None) -> VisibleRange:
    """Visible range centred on center_ms (default now) sized for the scale."""
    center = center_ms if center_ms is not None else now_ms()
    if scale == TimeScale.WEEKLY:
        half_span = 4 * 7 * DAY_MS  # 4 weeks each side
    elif scale == TimeScale.MONTHLY:
        half_span = 3 * 30 * DAY_MS  # ~3 months each side
    else:
        half_span = 6 * 91 * DAY_MS  # ~6 quarters each side
    return VisibleRange(start=center - half_span, end=center + half_span)


__all__ = [
    "BEST_SCALE_WEEKLY_MAX_DAYS",
    "BEST_SCALE_MONTHLY_MAX_DAYS",
    "EFFECTIVE_SCALE_WEEKLY_MAX_DAYS",
    "EFFECTIVE_SCALE_MONTHLY_MAX_DAYS",
    "best_time_scale",
    "effective_time_scale",
    "compute_time_range",
    "compute_initial_range",
    "range_for_scale",
]
