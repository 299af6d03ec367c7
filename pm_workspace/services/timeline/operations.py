# pm_workspace_core/pm_workspace/services/timeline/operations.py
"""
Bulk roadmap edits:
- import_features: place feature-tree leaves on the roadmap, staggered
- apply_roadmap_operations: add / update / remove proposals from the AI-tool layer
- roadmap_pulse: overdue and upcoming deadlines for the dashboard
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from pm_workspace.config import settings
from pm_workspace.schemas.features import FlatFeature
from pm_workspace.schemas.records import RoadmapItemPatch, RoadmapOperation
from pm_workspace.schemas.roadmap import ItemStatus, ItemType, RoadmapArtifact, RoadmapItem, RoadmapLane
from pm_workspace.services.timeline.conversion import normalize_item_dates
from pm_workspace.services.timeline.lanes import new_lane, resolve_lane
from pm_workspace.utils.dates import format_date, is_valid_date_string, today_date
from pm_workspace.utils.ids import generate_id

logger = logging.getLogger(__name__)


def _ensure_lane(artifact: RoadmapArtifact, lane_ref: Optional[str] = None) -> Tuple[RoadmapArtifact, RoadmapLane]:
    """Lane named by lane_ref, else the first lane, creating a default lane when there is none."""
    lane = resolve_lane(artifact, lane_ref)
    if lane is not None:
        return artifact, lane
    if artifact.lanes:
        return artifact, artifact.lanes[0]
    lane = new_lane(artifact.lanes)
    return artifact.model_copy(update={"lanes": [lane]}), lane


# ---------------------------------------------------------------------------
# Import from feature tree
# ---------------------------------------------------------------------------

def import_features(
    artifact: RoadmapArtifact,
    features: Sequence[FlatFeature],
    lane_id: Optional[str] = None,
    today: Optional[date] = None,
) -> RoadmapArtifact:
    """Append one feature item per leaf, staggered by IMPORT_STAGGER_DAYS.

    Each item covers IMPORT_SPAN_DAYS calendar days, both ends inclusive.
    Group nodes in ``features`` are ignored.
    """
    leaves = [f for f in features if f.is_leaf]
    if not leaves:
        return artifact

    artifact, lane = _ensure_lane(artifact, lane_id)
    start = today_date(today)
    span = timedelta(days=settings.IMPORT_SPAN_DAYS - 1)
    stagger = timedelta(days=settings.IMPORT_STAGGER_DAYS)

    new_items: List[RoadmapItem] = []
    for i, feature in enumerate(leaves):
        item_start = start + stagger * i
        new_items.append(
            RoadmapItem(
                id=generate_id(),
                title=feature.node.title,
                description=feature.node.description,
                lane_id=lane.id,
                start_date=format_date(item_start),
                end_date=format_date(item_start + span),
                status=ItemStatus.NOT_STARTED,
                type=ItemType.FEATURE,
                source_feature_id=feature.breadcrumb,
            )
        )

    logger.info(
        "roadmap.import.done",
        extra={"roadmap_id": artifact.id, "lane_id": lane.id, "count": len(new_items), "skipped": len(features) - len(leaves)},
    )
    return artifact.model_copy(update={"items": [*artifact.items, *new_items]})


# ---------------------------------------------------------------------------
# AI-proposed operations
# ---------------------------------------------------------------------------

def _find_item(items: Sequence[RoadmapItem], patch: RoadmapItemPatch) -> Optional[int]:
    """Index of the target item: id match first, then exact title."""
    if patch.id:
        for i, it in enumerate(items):
            if it.id == patch.id:
                return i
    if patch.title:
        for i, it in enumerate(items):
            if it.title == patch.title:
                return i
    return None


def _valid_date(value: Optional[str]) -> Optional[str]:
    return value if is_valid_date_string(value) else None


def _add_item(artifact: RoadmapArtifact, patch: RoadmapItemPatch, today: date) -> RoadmapArtifact:
    artifact, lane = _ensure_lane(artifact, patch.lane_id)
    start = _valid_date(patch.start_date) or format_date(today)
    item = RoadmapItem(
        id=patch.id or generate_id(),
        title=patch.title,
        description=patch.description,
        lane_id=lane.id,
        start_date=start,
        end_date=_valid_date(patch.end_date) or start,
        status=patch.status or ItemStatus.NOT_STARTED,
        type=patch.type or ItemType.FEATURE,
        color=patch.color,
    )
    return artifact.model_copy(update={"items": [*artifact.items, normalize_item_dates(item)]})


def _update_item(artifact: RoadmapArtifact, index: int, patch: RoadmapItemPatch) -> RoadmapArtifact:
    current = artifact.items[index]
    update = {}
    for name in ("title", "description", "status", "type", "color"):
        value = getattr(patch, name)
        if value is not None:
            update[name] = value
    for name in ("start_date", "end_date"):
        value = _valid_date(getattr(patch, name))
        if value is not None:
            update[name] = value
    if patch.lane_id:
        lane = resolve_lane(artifact, patch.lane_id)
        if lane is not None:
            update["lane_id"] = lane.id
        else:
            logger.warning(
                "roadmap.operation.unknown_lane",
                extra={"item_id": current.id, "lane_id": patch.lane_id},
            )

    updated = normalize_item_dates(RoadmapItem.model_validate({**current.model_dump(), **update}))
    items = list(artifact.items)
    items[index] = updated
    return artifact.model_copy(update={"items": items})


def apply_roadmap_operations(
    artifact: RoadmapArtifact,
    operations: Iterable[RoadmapOperation],
    today: Optional[date] = None,
) -> RoadmapArtifact:
    """Apply proposals in order. Unmatched update/remove targets are logged and skipped."""
    now = today_date(today)
    applied = skipped = 0

    for op in operations:
        patch = op.item
        if op.action == "add":
            if not patch.title:
                logger.warning("roadmap.operation.skipped", extra={"action": op.action, "reason": "missing title"})
                skipped += 1
                continue
            artifact = _add_item(artifact, patch, now)
            applied += 1
            continue

        index = _find_item(artifact.items, patch)
        if index is None:
            logger.warning(
                "roadmap.operation.skipped",
                extra={"action": op.action, "item_id": patch.id, "reason": f"no item matches {patch.title!r}"},
            )
            skipped += 1
            continue

        if op.action == "remove":
            items = [it for i, it in enumerate(artifact.items) if i != index]
            artifact = artifact.model_copy(update={"items": items})
        else:
            artifact = _update_item(artifact, index, patch)
        applied += 1

    logger.info(
        "roadmap.operations.done",
        extra={"roadmap_id": artifact.id, "applied": applied, "skipped": skipped},
    )
    return artifact


# ---------------------------------------------------------------------------
# Roadmap pulse
# ---------------------------------------------------------------------------

@dataclass
class RoadmapPulse:
    overdue: List[RoadmapItem] = field(default_factory=list)
    upcoming: List[RoadmapItem] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.overdue and not self.upcoming


def roadmap_pulse(
    artifact: RoadmapArtifact,
    today: Optional[date] = None,
    horizon_days: Optional[int] = None,
) -> RoadmapPulse:
    """Non-done items past their end date, and those ending within the horizon.

    Items with an unparseable end date are left out.
    """
    now = today_date(today)
    horizon = now + timedelta(days=horizon_days if horizon_days is not None else settings.DEADLINE_HORIZON_DAYS)
    today_str, horizon_str = format_date(now), format_date(horizon)

    pulse = RoadmapPulse()
    for it in artifact.items:
        if it.status == ItemStatus.DONE or not is_valid_date_string(it.end_date):
            continue
        if it.end_date < today_str:
            pulse.overdue.append(it)
        elif it.end_date <= horizon_str:
            pulse.upcoming.append(it)

    pulse.overdue.sort(key=lambda it: it.end_date)
    pulse.upcoming.sort(key=lambda it: it.end_date)
    return pulse


__all__ = ["import_features", "apply_roadmap_operations", "RoadmapPulse", "roadmap_pulse"]
