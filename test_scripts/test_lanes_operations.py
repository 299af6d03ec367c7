# pm_workspace_core/test_scripts/test_lanes_operations.py

from __future__ import annotations

import pytest

from pm_workspace.config import settings
from pm_workspace.schemas.records import RoadmapOperation
from pm_workspace.schemas.roadmap import ItemStatus, ItemType, RoadmapArtifact, RoadmapItem
from pm_workspace.services.scoring import flatten_tree
from pm_workspace.services.timeline.lanes import (
    add_lane,
    delete_lane,
    next_lane_color,
    rename_lane,
    repair_lane_references,
    resolve_lane,
)
from pm_workspace.services.timeline.operations import (
    apply_roadmap_operations,
    import_features,
    roadmap_pulse,
)


def _ops(*raw):
    return [RoadmapOperation.model_validate(r) for r in raw]


# ---------------------------------------------------------------------------
# Lanes
# ---------------------------------------------------------------------------

def test_lane_colors_cycle():
    palette = settings.LANE_COLORS
    assert next_lane_color(0) == palette[0]
    assert next_lane_color(len(palette)) == palette[0]
    assert next_lane_color(3, ["#000000", "#ffffff"]) == "#ffffff"


def test_add_lane_defaults(sample_roadmap):
    updated = add_lane(sample_roadmap)
    lane = updated.lanes[-1]
    assert lane.name == "Lane 3"
    assert lane.color == settings.LANE_COLORS[2]
    assert lane.id not in sample_roadmap.lane_ids()
    assert len(sample_roadmap.lanes) == 2


def test_rename_lane(sample_roadmap):
    updated = rename_lane(sample_roadmap, "lane-fe", "  Web  ")
    assert updated.lanes[0].name == "Web"
    with pytest.raises(ValueError):
        rename_lane(sample_roadmap, "lane-fe", "   ")


def test_delete_lane_moves_items_to_first_remaining(sample_roadmap):
    updated = delete_lane(sample_roadmap, "lane-fe")
    assert updated.lane_ids() == ["lane-be"]
    assert {it.lane_id for it in updated.items} == {"lane-be"}
    assert len(updated.items) == 4


def test_delete_last_lane_drops_items():
    artifact = RoadmapArtifact(title="Solo", lanes=[], items=[])
    artifact = add_lane(artifact, "Only")
    lane_id = artifact.lanes[0].id
    artifact = artifact.model_copy(
        update={
            "items": [
                RoadmapItem(id="a", title="A", lane_id=lane_id, start_date="2026-03-01", end_date="2026-03-02")
            ]
        }
    )
    updated = delete_lane(artifact, lane_id)
    assert updated.lanes == []
    assert updated.items == []


def test_delete_unknown_lane_is_noop(sample_roadmap):
    assert delete_lane(sample_roadmap, "missing") is sample_roadmap


def test_repair_lane_references(sample_roadmap):
    broken = sample_roadmap.model_copy(
        update={"items": [*sample_roadmap.items[:3], sample_roadmap.items[3].model_copy(update={"lane_id": "gone"})]}
    )
    repaired = repair_lane_references(broken)
    assert repaired.items[3].lane_id == "lane-fe"
    assert repair_lane_references(sample_roadmap) is sample_roadmap


def test_resolve_lane_by_id_then_name(sample_roadmap):
    assert resolve_lane(sample_roadmap, "lane-be").name == "Backend"
    assert resolve_lane(sample_roadmap, "frontend").id == "lane-fe"
    assert resolve_lane(sample_roadmap, "Mobile") is None
    assert resolve_lane(sample_roadmap, None) is None


# ---------------------------------------------------------------------------
# Import from the feature tree
# ---------------------------------------------------------------------------

def test_import_features_staggers_leaves(sample_roadmap, sample_tree, fixed_today):
    updated = import_features(sample_roadmap, flatten_tree(sample_tree), today=fixed_today)
    imported = updated.items[4:]
    assert [it.title for it in imported] == ["One-page checkout", "Saved cards", "Price filter", "Dark mode"]
    assert [(it.start_date, it.end_date) for it in imported] == [
        ("2026-03-02", "2026-03-15"),
        ("2026-03-09", "2026-03-22"),
        ("2026-03-16", "2026-03-29"),
        ("2026-03-23", "2026-04-05"),
    ]
    assert all(it.lane_id == "lane-fe" for it in imported)
    assert all(it.status == ItemStatus.NOT_STARTED and it.type == ItemType.FEATURE for it in imported)
    assert imported[2].source_feature_id == "Search › Filters › Price filter"
    assert len({it.id for it in updated.items}) == len(updated.items)


def test_import_into_named_lane(sample_roadmap, sample_tree, fixed_today):
    updated = import_features(sample_roadmap, flatten_tree(sample_tree), lane_id="Backend", today=fixed_today)
    assert all(it.lane_id == "lane-be" for it in updated.items[4:])


def test_import_creates_lane_when_none(sample_tree, fixed_today):
    empty = RoadmapArtifact(title="New")
    updated = import_features(empty, flatten_tree(sample_tree), today=fixed_today)
    assert len(updated.lanes) == 1
    assert updated.lanes[0].name == "Lane 1"
    assert {it.lane_id for it in updated.items} == {updated.lanes[0].id}


def test_import_nothing_is_noop(sample_roadmap):
    assert import_features(sample_roadmap, []) is sample_roadmap


# ---------------------------------------------------------------------------
# AI-proposed operations
# ---------------------------------------------------------------------------

def test_add_operation_defaults(sample_roadmap, fixed_today):
    updated = apply_roadmap_operations(
        sample_roadmap,
        _ops({"action": "add", "item": {"title": "Launch webinar", "type": "Milestone", "laneId": "backend"}}),
        today=fixed_today,
    )
    added = updated.items[-1]
    assert added.title == "Launch webinar"
    assert added.type == ItemType.MILESTONE
    assert added.lane_id == "lane-be"
    assert added.start_date == added.end_date == "2026-03-02"
    assert added.status == ItemStatus.NOT_STARTED


def test_add_without_title_is_skipped(sample_roadmap):
    updated = apply_roadmap_operations(sample_roadmap, _ops({"action": "add", "item": {}}))
    assert len(updated.items) == 4


def test_update_by_title_and_id(sample_roadmap):
    updated = apply_roadmap_operations(
        sample_roadmap,
        _ops(
            {"action": "update", "item": {"title": "Billing page", "status": "in progress", "endDate": "2026-03-25"}},
            {"action": "UPDATE", "item": {"id": "it-3", "status": "done", "laneId": "Frontend"}},
        ),
    )
    billing = next(it for it in updated.items if it.id == "it-2")
    assert billing.status == ItemStatus.IN_PROGRESS
    assert billing.end_date == "2026-03-25"

    api = next(it for it in updated.items if it.id == "it-3")
    assert api.status == ItemStatus.DONE
    assert api.lane_id == "lane-fe"


def test_update_ignores_bad_dates_and_unknown_lane(sample_roadmap):
    updated = apply_roadmap_operations(
        sample_roadmap,
        _ops({"action": "update", "item": {"id": "it-1", "startDate": "next week", "laneId": "Mobile"}}),
    )
    onboarding = updated.items[0]
    assert onboarding.start_date == "2026-03-02"
    assert onboarding.lane_id == "lane-fe"


def test_remove_and_unmatched_operations(sample_roadmap):
    updated = apply_roadmap_operations(
        sample_roadmap,
        _ops(
            {"action": "remove", "item": {"title": "Public beta"}},
            {"action": "remove", "item": {"title": "public beta"}},
            {"action": "update", "item": {"id": "nope"}},
        ),
    )
    assert [it.id for it in updated.items] == ["it-1", "it-2", "it-3"]


def test_invalid_action_rejected():
    with pytest.raises(ValueError):
        RoadmapOperation.model_validate({"action": "rename", "item": {}})


# ---------------------------------------------------------------------------
# Pulse
# ---------------------------------------------------------------------------

def test_roadmap_pulse(sample_roadmap, fixed_today):
    pulse = roadmap_pulse(sample_roadmap, today=fixed_today)
    assert [it.id for it in pulse.overdue] == ["it-3"]
    assert [it.id for it in pulse.upcoming] == ["it-1"]
    assert not pulse.is_empty

    wide = roadmap_pulse(sample_roadmap, today=fixed_today, horizon_days=60)
    assert [it.id for it in wide.upcoming] == ["it-1", "it-2", "it-4"]


def test_pulse_skips_done_items(sample_roadmap, fixed_today):
    items = [it.model_copy(update={"status": ItemStatus.DONE}) for it in sample_roadmap.items]
    pulse = roadmap_pulse(sample_roadmap.model_copy(update={"items": items}), today=fixed_today)
    assert pulse.is_empty
