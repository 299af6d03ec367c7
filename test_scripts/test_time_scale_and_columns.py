# pm_workspace_core/test_scripts/test_time_scale_and_columns.py

from __future__ import annotations

from datetime import date, timedelta

import pytest

from pm_workspace.schemas.roadmap import RoadmapItem, TimeScale, VisibleRange
from pm_workspace.services.timeline.columns import columns_for_range, generate_time_columns
from pm_workspace.services.timeline.time_scale import (
    best_time_scale,
    compute_initial_range,
    compute_time_range,
    effective_time_scale,
    range_for_scale,
)
from pm_workspace.utils.dates import DAY_MS, date_to_ms
from pm_workspace.utils.periods import parse_period_key


def _items_spread(days: int):
    start = date(2026, 1, 5)
    end = start + timedelta(days=days)
    return [
        RoadmapItem(id="a", title="A", lane_id="l", start_date=start.isoformat(), end_date=start.isoformat()),
        RoadmapItem(id="b", title="B", lane_id="l", start_date=end.isoformat(), end_date=end.isoformat()),
    ]


def test_best_time_scale_empty_is_weekly():
    assert best_time_scale([]) == TimeScale.WEEKLY


@pytest.mark.parametrize(
    "days, expected",
    [
        (56, TimeScale.WEEKLY),
        (57, TimeScale.MONTHLY),
        (180, TimeScale.MONTHLY),
        (181, TimeScale.QUARTERLY),
    ],
)
def test_best_time_scale_boundaries(days, expected):
    assert best_time_scale(_items_spread(days)) == expected


@pytest.mark.parametrize(
    "days, expected",
    [
        (90, TimeScale.WEEKLY),
        (91, TimeScale.MONTHLY),
        (365, TimeScale.MONTHLY),
        (366, TimeScale.QUARTERLY),
    ],
)
def test_effective_time_scale_boundaries(days, expected):
    assert effective_time_scale(VisibleRange(start=0, end=days * DAY_MS)) == expected


def test_compute_time_range_weekly_pads_and_snaps(sample_roadmap):
    start, end = compute_time_range(sample_roadmap.items, TimeScale.WEEKLY)
    # earliest 2026-02-16 minus two weeks, snapped to Monday
    assert start == date(2026, 2, 2)
    assert start.weekday() == 0
    # latest 2026-04-01 plus two weeks, snapped to Sunday
    assert end == date(2026, 4, 19)
    assert end.weekday() == 6


def test_compute_time_range_monthly_pads_by_a_month(sample_roadmap):
    start, end = compute_time_range(sample_roadmap.items, TimeScale.MONTHLY)
    assert start == date(2026, 1, 1)
    assert end == date(2026, 5, 31)


def test_compute_time_range_empty_uses_today(fixed_today):
    start, end = compute_time_range([], TimeScale.MONTHLY, today=fixed_today)
    assert start == date(2026, 2, 1)
    assert end == date(2026, 8, 31)

    initial = compute_initial_range([], TimeScale.MONTHLY, today=fixed_today)
    assert initial.start == date_to_ms(date(2026, 2, 1))


def test_range_for_scale_is_centred():
    centre = date_to_ms(date(2026, 6, 1))
    vr = range_for_scale(TimeScale.WEEKLY, centre)
    assert vr.start + vr.width_ms // 2 == centre
    assert vr.width_ms == 56 * DAY_MS
    assert effective_time_scale(range_for_scale(TimeScale.QUARTERLY, centre)) == TimeScale.QUARTERLY


def test_weekly_columns_start_on_monday_and_are_contiguous():
    cols = generate_time_columns(date(2026, 3, 4), date(2026, 3, 31), TimeScale.WEEKLY)
    assert cols[0].start == date(2026, 3, 2)
    assert cols[0].label == "Mar 2"
    assert cols[0].key == "2026-W10"
    assert all(c.start.weekday() == 0 for c in cols)
    for prev, nxt in zip(cols, cols[1:]):
        assert nxt.start == prev.end + timedelta(days=1)
    assert cols[-1].contains(date(2026, 3, 31))


def test_week_keys_unique_across_year_boundary():
    cols = generate_time_columns(date(2025, 12, 1), date(2027, 1, 31), TimeScale.WEEKLY)
    keys = [c.key for c in cols]
    assert len(keys) == len(set(keys))
    # 2026-12-28 is in ISO week 53 of 2026
    assert "2026-W53" in keys


def test_monthly_and_quarterly_columns():
    months = generate_time_columns(date(2026, 1, 15), date(2026, 4, 2), TimeScale.MONTHLY)
    assert [c.key for c in months] == ["2026-01", "2026-02", "2026-03", "2026-04"]
    assert months[1].label == "Feb 2026"
    assert months[1].end == date(2026, 2, 28)

    quarters = generate_time_columns(date(2026, 2, 1), date(2027, 1, 1), TimeScale.QUARTERLY)
    assert [c.label for c in quarters] == ["Q1 2026", "Q2 2026", "Q3 2026", "Q4 2026", "Q1 2027"]
    assert quarters[0].start == date(2026, 1, 1)


def test_column_keys_parse_back_to_the_same_window():
    for scale in TimeScale:
        for col in generate_time_columns(date(2026, 1, 1), date(2026, 12, 31), scale):
            window = parse_period_key(col.key)
            assert (window.start, window.end) == (col.start, col.end)


def test_columns_accept_milliseconds_and_inverted_range():
    start_ms = date_to_ms(date(2026, 3, 1))
    end_ms = date_to_ms(date(2026, 3, 31))
    cols = generate_time_columns(start_ms, end_ms, TimeScale.MONTHLY)
    assert [c.key for c in cols] == ["2026-03"]
    assert generate_time_columns(date(2026, 3, 31), date(2026, 3, 1), TimeScale.WEEKLY) == []


def test_columns_for_range_picks_effective_scale():
    vr = VisibleRange(start=date_to_ms(date(2026, 1, 1)), end=date_to_ms(date(2026, 3, 1)))
    scale, cols = columns_for_range(vr)
    assert scale == TimeScale.WEEKLY
    assert cols[0].start <= date(2026, 1, 1) <= cols[0].end
    assert cols[-1].contains(date(2026, 2, 28))
