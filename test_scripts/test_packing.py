# pm_workspace_core/test_scripts/test_packing.py

from __future__ import annotations

import pytest

from pm_workspace.exceptions import LanePackingError
from pm_workspace.schemas.roadmap import RoadmapArtifact, RoadmapItem, RoadmapLane
from pm_workspace.services.timeline.packing import PackEntry, layout_lanes, max_concurrency, pack_lane


def _rows(sub_rows):
    return [[e.item_id for e in row.entries] for row in sub_rows]


def test_disjoint_spans_share_one_row():
    entries = [PackEntry("a", 0, 10), PackEntry("b", 10, 20), PackEntry("c", 25, 30)]
    assert _rows(pack_lane(entries)) == [["a", "b", "c"]]


def test_overlaps_open_new_rows():
    entries = [PackEntry("a", 0, 10), PackEntry("b", 5, 15), PackEntry("c", 12, 20)]
    assert _rows(pack_lane(entries)) == [["a", "c"], ["b"]]


def test_input_order_does_not_matter_for_row_count():
    entries = [PackEntry("c", 12, 20), PackEntry("a", 0, 10), PackEntry("b", 5, 15)]
    rows = pack_lane(entries)
    assert len(rows) == max_concurrency(entries) == 2
    assert rows[0].entries[0].item_id == "a"


def test_ties_keep_input_order():
    entries = [PackEntry("x", 0, 5), PackEntry("y", 0, 5), PackEntry("z", 0, 5)]
    assert _rows(pack_lane(entries)) == [["x"], ["y"], ["z"]]


def test_row_count_equals_max_concurrency_on_staircase():
    entries = [PackEntry(str(i), i * 3, i * 3 + 10) for i in range(8)]
    rows = pack_lane(entries)
    assert len(rows) == max_concurrency(entries)
    # no overlap within a row
    for row in rows:
        for prev, nxt in zip(row.entries, row.entries[1:]):
            assert prev.end <= nxt.start


def test_zero_length_spans_are_packed_and_counted_alike():
    entries = [PackEntry("m1", 10, 10), PackEntry("m2", 10, 10), PackEntry("a", 0, 20)]
    rows = pack_lane(entries)
    assert max_concurrency(entries) == 3
    assert len(rows) == 3


def test_inverted_span_raises():
    with pytest.raises(LanePackingError):
        pack_lane([PackEntry("bad", 10, 5)])
    with pytest.raises(LanePackingError):
        max_concurrency([PackEntry("bad", 10, 5)])


def test_empty_lane():
    assert pack_lane([]) == []
    assert max_concurrency([]) == 0


def test_layout_lanes(sample_roadmap):
    layouts = layout_lanes(sample_roadmap, row_height_px=40)
    assert [l.lane.id for l in layouts] == ["lane-fe", "lane-be"]

    fe, be = layouts
    # Onboarding (03-02..03-15) overlaps Billing (03-10..03-20)
    assert len(fe.sub_rows) == 2
    assert fe.height_px == 80
    assert fe.row_of == {"it-1": 0, "it-2": 1}

    # Payments API ends before the milestone
    assert len(be.sub_rows) == 1
    assert be.height_px == 40


def test_empty_lane_keeps_one_row_height():
    artifact = RoadmapArtifact(
        title="Empty",
        lanes=[RoadmapLane(id="l1", name="One", color="#3b82f6")],
    )
    (layout,) = layout_lanes(artifact, row_height_px=30)
    assert layout.sub_rows == []
    assert layout.height_px == 30


def test_adjacent_items_share_a_row():
    artifact = RoadmapArtifact(
        title="Back to back",
        lanes=[RoadmapLane(id="l1", name="One", color="#3b82f6")],
        items=[
            RoadmapItem(id="a", title="A", lane_id="l1", start_date="2026-03-01", end_date="2026-03-05"),
            RoadmapItem(id="b", title="B", lane_id="l1", start_date="2026-03-05", end_date="2026-03-09"),
        ],
    )
    (layout,) = layout_lanes(artifact)
    assert len(layout.sub_rows) == 1
