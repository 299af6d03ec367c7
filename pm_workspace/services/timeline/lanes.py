# pm_workspace_core/pm_workspace/services/timeline/lanes.py
"""
Lane editing. Every function returns a new RoadmapArtifact and keeps the
lane invariant: each item's lane_id names an existing lane.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from pm_workspace.config import settings
from pm_workspace.schemas.roadmap import RoadmapArtifact, RoadmapItem, RoadmapLane
from pm_workspace.utils.ids import generate_id

logger = logging.getLogger(__name__)


def next_lane_color(lane_count: int, palette: Optional[List[str]] = None) -> str:
    colors = palette or settings.LANE_COLORS
    return colors[lane_count % len(colors)]


def new_lane(existing: List[RoadmapLane], name: Optional[str] = None) -> RoadmapLane:
    return RoadmapLane(
        id=generate_id(),
        name=name or f"Lane {len(existing) + 1}",
        color=next_lane_color(len(existing)),
    )


def add_lane(artifact: RoadmapArtifact, name: Optional[str] = None) -> RoadmapArtifact:
    lane = new_lane(artifact.lanes, name)
    logger.info("roadmap.lane.added", extra={"roadmap_id": artifact.id, "lane_id": lane.id})
    return artifact.model_copy(update={"lanes": [*artifact.lanes, lane]})


def rename_lane(artifact: RoadmapArtifact, lane_id: str, name: str) -> RoadmapArtifact:
    name = (name or "").strip()
    if not name:
        raise ValueError("Lane name cannot be empty")
    lanes = [lane.model_copy(update={"name": name}) if lane.id == lane_id else lane for lane in artifact.lanes]
    return artifact.model_copy(update={"lanes": lanes})


def delete_lane(artifact: RoadmapArtifact, lane_id: str) -> RoadmapArtifact:
    """Remove a lane; its items move to the first remaining lane, or are dropped if none is left."""
    remaining = [lane for lane in artifact.lanes if lane.id != lane_id]
    if len(remaining) == len(artifact.lanes):
        return artifact

    fallback = remaining[0].id if remaining else None
    items: List[RoadmapItem] = []
    moved = dropped = 0
    for it in artifact.items:
        if it.lane_id != lane_id:
            items.append(it)
        elif fallback is not None:
            items.append(it.model_copy(update={"lane_id": fallback}))
            moved += 1
        else:
            dropped += 1

    logger.info(
        "roadmap.lane.deleted",
        extra={"roadmap_id": artifact.id, "lane_id": lane_id, "count": moved, "skipped": dropped},
    )
    return artifact.model_copy(update={"lanes": remaining, "items": items})


def repair_lane_references(artifact: RoadmapArtifact) -> RoadmapArtifact:
    """Re-home items whose lane no longer exists (first lane, or dropped when there are no lanes)."""
    known = set(artifact.lane_ids())
    orphans = [it for it in artifact.items if it.lane_id not in known]
    if not orphans:
        return artifact

    fallback = artifact.lanes[0].id if artifact.lanes else None
    if fallback is None:
        items = [it for it in artifact.items if it.lane_id in known]
    else:
        items = [it if it.lane_id in known else it.model_copy(update={"lane_id": fallback}) for it in artifact.items]

    logger.warning(
        "roadmap.lane.orphans_repaired",
        extra={"roadmap_id": artifact.id, "count": len(orphans), "lane_id": fallback},
    )
    return artifact.model_copy(update={"items": items})


def resolve_lane(artifact: RoadmapArtifact, ref: Optional[str]) -> Optional[RoadmapLane]:
    """Find a lane by id, then by case-insensitive name."""
    if not ref:
        return None
    for lane in artifact.lanes:
        if lane.id == ref:
            return lane
    wanted = ref.strip().lower()
    for lane in artifact.lanes:
        if lane.name.strip().lower() == wanted:
            return lane
    return None


__all__ = [
    "next_lane_color",
    "new_lane",
    "add_lane",
    "rename_lane",
    "delete_lane",
    "repair_lane_references",
    "resolve_lane",
]
