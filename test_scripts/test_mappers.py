# pm_workspace_core/test_scripts/test_mappers.py

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pm_workspace.schemas.features import FeatureNode
from pm_workspace.schemas.records import DbItemStatus, DbItemType, DbTimeScale, FeatureRecord, RoadmapRecord
from pm_workspace.schemas.roadmap import ItemStatus, ItemType, TimeScale
from pm_workspace.services.feature_mapper import (
    SYNTHETIC_ROOT_TITLE,
    db_feature_tree_to_artifact,
    flatten_feature_nodes,
)
from pm_workspace.services.markdown import parse_feature_tree_markdown
from pm_workspace.services.roadmap_mapper import artifact_to_sync_input, db_roadmap_to_artifact


def _record(**overrides) -> RoadmapRecord:
    payload = {
        "id": "rm-db",
        "title": "Stored",
        "timeScale": "WEEKLY",
        "lanes": [
            {"id": "l2", "name": "Second", "color": "#8b5cf6", "order": 1},
            {"id": "l1", "name": "First", "color": "#3b82f6", "order": 0},
        ],
        "items": [
            {
                "id": "i2",
                "title": "Later",
                "status": "DONE",
                "type": "MILESTONE",
                "startDate": "2026-04-01T00:00:00Z",
                "endDate": "2026-04-01T00:00:00Z",
                "laneId": "l2",
                "order": 1,
            },
            {
                "id": "i1",
                "title": "Sooner",
                "status": "IN_PROGRESS",
                "type": "FEATURE",
                "startDate": "2026-03-01T23:30:00Z",
                "endDate": "2026-03-10T00:00:00",
                "laneId": "l1",
                "featureId": "Checkout › Saved cards",
                "order": 0,
            },
        ],
    }
    payload.update(overrides)
    return RoadmapRecord.model_validate(payload)


# ---------------------------------------------------------------------------
# Roadmap
# ---------------------------------------------------------------------------

def test_db_roadmap_to_artifact_orders_and_converts(fixed_today):
    artifact = db_roadmap_to_artifact(_record(), today=fixed_today)
    assert artifact.id == "rm-db"
    assert artifact.time_scale == TimeScale.WEEKLY
    assert artifact.lane_ids() == ["l1", "l2"]

    sooner, later = artifact.items
    assert sooner.id == "i1"
    assert (sooner.start_date, sooner.end_date) == ("2026-03-01", "2026-03-10")
    assert sooner.status == ItemStatus.IN_PROGRESS
    assert sooner.source_feature_id == "Checkout › Saved cards"
    assert later.type == ItemType.MILESTONE
    assert later.status == ItemStatus.DONE


def test_db_dates_use_utc_calendar_day(fixed_today):
    offset = timezone(timedelta(hours=-5))
    record = _record(
        items=[
            {
                "id": "i1",
                "title": "Late evening in New York",
                "startDate": datetime(2026, 3, 1, 22, 0, tzinfo=offset),
                "laneId": "l1",
            }
        ]
    )
    item = db_roadmap_to_artifact(record, today=fixed_today).items[0]
    assert item.start_date == "2026-03-02"
    # missing end date falls back to today
    assert item.end_date == "2026-03-02"


def test_db_unknown_codes_fall_back(fixed_today):
    record = _record(
        timeScale="DAILY",
        items=[{"id": "i1", "title": "Odd", "status": "BLOCKED", "type": "EPIC", "laneId": "missing"}],
    )
    artifact = db_roadmap_to_artifact(record, today=fixed_today)
    assert artifact.time_scale == TimeScale.MONTHLY
    item = artifact.items[0]
    assert (item.status, item.type) == (ItemStatus.NOT_STARTED, ItemType.FEATURE)
    # unknown lane is re-homed to the first lane
    assert item.lane_id == "l1"


def test_db_roadmap_without_lanes_drops_items(fixed_today):
    artifact = db_roadmap_to_artifact(_record(lanes=[]), today=fixed_today)
    assert artifact.lanes == []
    assert artifact.items == []


def test_artifact_to_sync_input(sample_roadmap):
    payload = artifact_to_sync_input(sample_roadmap)
    assert payload.time_scale == DbTimeScale.MONTHLY
    assert [(l.client_id, l.order) for l in payload.lanes] == [("lane-fe", 0), ("lane-be", 1)]

    first = payload.items[0]
    assert first.status == DbItemStatus.IN_PROGRESS
    assert first.type == DbItemType.FEATURE
    assert first.lane_client_id == "lane-fe"
    assert [it.order for it in payload.items] == [0, 1, 2, 3]

    wire = payload.model_dump(by_alias=True, mode="json")
    assert wire["timeScale"] == "MONTHLY"
    assert wire["items"][3]["startDate"] == wire["items"][3]["endDate"] == "2026-04-01"
    assert wire["items"][0]["laneClientId"] == "lane-fe"


def test_sync_input_normalizes_milestone_dates(sample_roadmap):
    items = list(sample_roadmap.items)
    items[3] = items[3].model_copy(update={"end_date": "2026-04-03"})
    payload = artifact_to_sync_input(sample_roadmap.model_copy(update={"items": items}))
    assert payload.items[3].end_date == "2026-04-01"


def test_load_then_sync_keeps_ids(fixed_today):
    artifact = db_roadmap_to_artifact(_record(), today=fixed_today)
    payload = artifact_to_sync_input(artifact)
    assert [it.client_id for it in payload.items] == ["i1", "i2"]
    assert [it.lane_client_id for it in payload.items] == ["l1", "l2"]


# ---------------------------------------------------------------------------
# Feature tree
# ---------------------------------------------------------------------------

def _feature(id_, title, order=0, children=None, **rice):
    return FeatureRecord.model_validate({"id": id_, "title": title, "order": order, "children": children, **rice})


def test_db_feature_tree_empty_is_none():
    assert db_feature_tree_to_artifact([]) is None


def test_db_feature_tree_single_root():
    root = _feature(
        "f1",
        "Checkout",
        children=[
            {"id": "f2", "title": "Saved cards", "riceReach": 3000, "riceImpact": 1, "riceConfidence": 100, "riceEffort": 1},
        ],
    )
    tree = db_feature_tree_to_artifact([root])
    assert tree.root_feature == "Checkout"
    (checkout,) = tree.children
    assert checkout.db_id == "f1"
    assert checkout.children[0].reach == 3000
    assert checkout.children[0].db_id == "f2"
    assert tree.content.startswith("# Checkout\n\n- Checkout\n  - Saved cards [R:3000 I:1 C:100% E:1w]")


def test_db_feature_tree_many_roots_are_ordered():
    tree = db_feature_tree_to_artifact([_feature("b", "Beta", order=1), _feature("a", "Alpha", order=0)])
    assert tree.root_feature == SYNTHETIC_ROOT_TITLE
    assert [c.title for c in tree.children] == ["Alpha", "Beta"]
    assert parse_feature_tree_markdown(tree.content).children == [
        FeatureNode(title="Alpha"),
        FeatureNode(title="Beta"),
    ]


def test_flatten_feature_nodes_links_parents():
    nodes = [
        FeatureNode(
            title="Checkout",
            db_id="f1",
            children=[FeatureNode(title="Saved cards", db_id="f2"), FeatureNode(title="New one")],
        ),
        FeatureNode(title="Search", db_id="f3"),
    ]
    rows = flatten_feature_nodes(nodes)
    assert [(r.title, r.parent_db_id, r.order) for r in rows] == [
        ("Checkout", None, 0),
        ("Saved cards", "f1", 0),
        ("New one", "f1", 1),
        ("Search", None, 1),
    ]
    assert rows[2].db_id is None
    assert "parentDbId" in rows[1].model_dump(by_alias=True)
