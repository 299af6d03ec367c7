# pm_workspace_core/pm_workspace/services/timeline/columns.py
"""
Header columns of the timeline grid.

Columns are whole calendar buckets (ISO weeks, months, quarters) covering
every instant of the requested range, so the first and last column may
extend past it. Keys reuse the period-key formats understood by
utils.periods.parse_period_key.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Dict, Iterator, List, Tuple, Union

from pm_workspace.schemas.roadmap import TimeScale, VisibleRange
from pm_workspace.services.timeline.time_scale import effective_time_scale
from pm_workspace.utils.dates import date_to_ms, ms_to_date
from pm_workspace.utils.periods import (
    PeriodWindow,
    iter_months,
    iter_quarters,
    iter_weeks,
    month_key,
    quarter_key,
    quarter_of,
    week_key,
)

DateLike = Union[date, int]


@dataclass(frozen=True)
class TimeColumn(PeriodWindow):
    """A labelled period window; start/end are inclusive calendar days."""
    key: str = ""
    label: str = ""

    @property
    def start_date(self) -> date:
        return self.start

    @property
    def end_date(self) -> date:
        return self.end

    @property
    def start_ms(self) -> int:
        return date_to_ms(self.start)

    @property
    def end_ms(self) -> int:
        """Exclusive end: local midnight after the last day."""
        return date_to_ms(self.end + timedelta(days=1))


def _week_label(d: date) -> str:
    return f"{d.strftime('%b')} {d.day}"


def _month_label(d: date) -> str:
    return d.strftime("%b %Y")


def _quarter_label(d: date) -> str:
    return f"Q{quarter_of(d)} {d.year}"


_SCALES: Dict[TimeScale, Tuple[Callable[[date, date], Iterator[PeriodWindow]], Callable[[date], str], Callable[[date], str]]] = {
    TimeScale.WEEKLY: (iter_weeks, week_key, _week_label),
    TimeScale.MONTHLY: (iter_months, month_key, _month_label),
    TimeScale.QUARTERLY: (iter_quarters, quarter_key, _quarter_label),
}


def _as_date(value: DateLike) -> date:
    if isinstance(value, date):
        return value
    return ms_to_date(int(value))


def generate_time_columns(range_start: DateLike, range_end: DateLike, scale: TimeScale) -> List[TimeColumn]:
    """Chronological, contiguous, duplicate-free columns covering [range_start, range_end].

    Accepts calendar dates or epoch milliseconds. An inverted range yields no
    columns.
    """
    start = _as_date(range_start)
    end = _as_date(range_end)
    if end < start:
        return []

    iterate, make_key, make_label = _SCALES[TimeScale(scale)]
    return [
        TimeColumn(start=w.start, end=w.end, key=make_key(w.start), label=make_label(w.start))
        for w in iterate(start, end)
    ]


def columns_for_range(visible_range: VisibleRange) -> Tuple[TimeScale, List[TimeColumn]]:
    """Columns for the live viewport, at the density its width calls for."""
    scale = effective_time_scale(visible_range)
    # visible_range.end is exclusive
    last_ms = max(visible_range.start, visible_range.end - 1)
    return scale, generate_time_columns(visible_range.start, last_ms, scale)


__all__ = ["TimeColumn", "generate_time_columns", "columns_for_range"]
