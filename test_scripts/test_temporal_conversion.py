# pm_workspace_core/test_scripts/test_temporal_conversion.py

from __future__ import annotations

from datetime import date, timedelta

import pytest

from pm_workspace.schemas.roadmap import ItemType, RoadmapItem, TimelineSpan, VisibleRange
from pm_workspace.services.timeline.conversion import (
    item_to_timeline_span,
    ms_to_px,
    normalize_item_dates,
    pan_range,
    px_to_ms,
    span_to_date_strings,
    zoom_range,
)
from pm_workspace.utils.dates import (
    DAY_MS,
    date_string_to_ms,
    date_to_ms,
    is_valid_date_string,
    ms_to_date_string,
    now_ms,
    parse_date,
    shift_date_string,
)


def _item(start: str, end: str, type_: ItemType = ItemType.FEATURE) -> RoadmapItem:
    return RoadmapItem(id="x", title="X", lane_id="l", start_date=start, end_date=end, type=type_)


def test_date_round_trip_over_two_years():
    d = date(2025, 1, 1)
    while d < date(2027, 1, 1):
        s = d.strftime("%Y-%m-%d")
        assert ms_to_date_string(date_string_to_ms(s)) == s
        d += timedelta(days=1)


def test_date_string_to_ms_is_local_midnight():
    assert date_string_to_ms("2026-03-02") == date_to_ms(date(2026, 3, 2))


@pytest.mark.parametrize("bad", ["", "not-a-date", "2026-02-30", "2026/03/02", "26-3-2", None])
def test_malformed_dates_fall_back_to_now(bad):
    before = now_ms()
    value = date_string_to_ms(bad)
    after = now_ms()
    assert before <= value <= after


def test_parse_date_is_strict():
    assert parse_date("2026-03-02") == date(2026, 3, 2)
    assert parse_date("2026-13-01") is None
    assert not is_valid_date_string("2026-3-2")


def test_non_milestone_span_round_trips():
    item = _item("2026-03-02", "2026-03-15")
    span = item_to_timeline_span(item)
    assert span.end > span.start
    assert span_to_date_strings(span) == {"start_date": "2026-03-02", "end_date": "2026-03-15"}


def test_milestone_span_is_widened_but_storage_is_not():
    milestone = _item("2026-04-01", "2026-04-01", ItemType.MILESTONE)
    span = item_to_timeline_span(milestone)
    assert span.end == span.start + DAY_MS
    # the item itself is untouched
    assert milestone.end_date == "2026-04-01"


def test_inverted_item_gets_one_day_span():
    span = item_to_timeline_span(_item("2026-03-10", "2026-03-01"))
    assert span.end - span.start == DAY_MS


def test_normalize_item_dates_collapses_milestones():
    milestone = _item("2026-04-01", "2026-04-02", ItemType.MILESTONE)
    assert normalize_item_dates(milestone).end_date == "2026-04-01"

    inverted = _item("2026-03-10", "2026-03-01")
    assert normalize_item_dates(inverted).end_date == "2026-03-10"

    fine = _item("2026-03-01", "2026-03-10")
    assert normalize_item_dates(fine) is fine


def test_shift_date_string():
    assert shift_date_string("2026-02-27", 3) == "2026-03-02"
    assert shift_date_string("2026-03-02", -1) == "2026-03-01"


def test_pixel_mapping_is_linear():
    vr = VisibleRange(start=0, end=10 * DAY_MS)
    assert ms_to_px(5 * DAY_MS, vr, 1000) == pytest.approx(500)
    assert px_to_ms(250, vr, 1000) == int(2.5 * DAY_MS)
    with pytest.raises(ValueError):
        ms_to_px(0, vr, 0)


def test_pan_and_zoom():
    vr = VisibleRange(start=0, end=10 * DAY_MS)
    panned = pan_range(vr, DAY_MS)
    assert (panned.start, panned.end) == (DAY_MS, 11 * DAY_MS)

    zoomed = zoom_range(vr, 2.0, anchor_ms=0)
    assert zoomed.start == 0
    assert zoomed.width_ms == 20 * DAY_MS

    tiny = zoom_range(vr, 0.001)
    assert tiny.width_ms == DAY_MS


def test_timeline_span_is_frozen():
    span = TimelineSpan(start=0, end=1)
    with pytest.raises(Exception):
        span.start = 5
