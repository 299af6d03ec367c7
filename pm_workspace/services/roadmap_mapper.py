# pm_workspace_core/pm_workspace/services/roadmap_mapper.py
"""
Persistence record <-> RoadmapArtifact.

Records use upper-snake enum codes and timestamps; the artifact uses
lowercase codes and YYYY-MM-DD calendar days. Unknown codes degrade to
defaults instead of failing the load.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
import logging
from typing import Optional

from pm_workspace.config import settings
from pm_workspace.schemas.records import (
    DbItemStatus,
    DbItemType,
    DbTimeScale,
    ItemSyncInput,
    LaneSyncInput,
    RoadmapRecord,
    RoadmapSyncInput,
)
from pm_workspace.schemas.roadmap import ItemStatus, ItemType, RoadmapArtifact, RoadmapItem, RoadmapLane, TimeScale
from pm_workspace.services.timeline.conversion import normalize_item_dates
from pm_workspace.services.timeline.lanes import repair_lane_references
from pm_workspace.utils.dates import format_date, today_date

logger = logging.getLogger(__name__)


def _code_to_enum(enum_cls, code: Optional[str], default):
    try:
        return enum_cls((code or "").strip().lower())
    except ValueError:
        return default


def _record_date(value: Optional[datetime], today: date) -> str:
    """UTC calendar day of a stored timestamp; naive timestamps are taken as UTC."""
    if value is None:
        return format_date(today)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_date(value.astimezone(timezone.utc).date())


def db_roadmap_to_artifact(record: RoadmapRecord, today: Optional[date] = None) -> RoadmapArtifact:
    now = today_date(today)
    lanes = [
        RoadmapLane(id=lane.id, name=lane.name, color=lane.color)
        for lane in sorted(record.lanes, key=lambda lane: lane.order)
    ]
    first_lane = lanes[0].id if lanes else ""

    items = []
    for it in sorted(record.items, key=lambda it: it.order):
        items.append(
            RoadmapItem(
                id=it.id,
                title=it.title,
                description=it.description,
                lane_id=it.lane_id or first_lane,
                start_date=_record_date(it.start_date, now),
                end_date=_record_date(it.end_date, now),
                status=_code_to_enum(ItemStatus, it.status, ItemStatus.NOT_STARTED),
                type=_code_to_enum(ItemType, it.type, ItemType.FEATURE),
                source_feature_id=it.feature_id,
                color=it.color,
            )
        )

    artifact = RoadmapArtifact(
        id=record.id,
        title=record.title,
        time_scale=_code_to_enum(TimeScale, record.time_scale, TimeScale(settings.DEFAULT_TIME_SCALE)),
        lanes=lanes,
        items=items,
    )
    logger.debug(
        "roadmap_mapper.loaded",
        extra={"roadmap_id": record.id, "count": len(lanes), "total": len(items)},
    )
    return repair_lane_references(artifact)


def artifact_to_sync_input(artifact: RoadmapArtifact) -> RoadmapSyncInput:
    """Ordered sync payload; milestones are normalized to end_date == start_date."""
    lanes = [
        LaneSyncInput(client_id=lane.id, name=lane.name, color=lane.color, order=i)
        for i, lane in enumerate(artifact.lanes)
    ]
    items = []
    for i, item in enumerate(artifact.items):
        item = normalize_item_dates(item)
        items.append(
            ItemSyncInput(
                client_id=item.id,
                title=item.title,
                description=item.description,
                lane_client_id=item.lane_id,
                start_date=item.start_date,
                end_date=item.end_date,
                status=DbItemStatus(item.status.value.upper()),
                type=DbItemType(item.type.value.upper()),
                color=item.color,
                order=i,
            )
        )
    return RoadmapSyncInput(
        title=artifact.title,
        time_scale=DbTimeScale(artifact.time_scale.value.upper()),
        lanes=lanes,
        items=items,
    )


__all__ = ["db_roadmap_to_artifact", "artifact_to_sync_input"]
