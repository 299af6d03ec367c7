# pm_workspace_core/pm_workspace/services/timeline/gestures.py
"""
Pointer gestures on roadmap bars: drag (move in time and across lanes) and
resize (move one edge).

The gesture is an explicit immutable state machine:

    IDLE --press/press_resize--> PENDING --move >= activation--> DRAGGING | RESIZING
    any  --cancel--> IDLE
    PENDING  --release--> IDLE (a click, no mutation)
    DRAGGING/RESIZING --release--> IDLE + ItemMutation

Every transition is a pure function returning a new GestureState. Pixel
deltas become whole-day offsets rounded to the snap grid of the visible
range, and offsets are applied as calendar-day arithmetic so a bar never
lands between midnights.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from datetime import date, timedelta
import logging
import math
from typing import Optional, Tuple

from pm_workspace.config import settings
from pm_workspace.exceptions import GestureError
from pm_workspace.schemas.roadmap import ItemMutation, RoadmapArtifact, RoadmapItem, VisibleRange
from pm_workspace.services.timeline.conversion import normalize_item_dates, px_delta_to_ms
from pm_workspace.utils.dates import DAY_MS, format_date, parse_date, shift_date_string

logger = logging.getLogger(__name__)

SNAP_DAILY_MAX_DAYS = 60
SNAP_WEEKLY_MAX_DAYS = 180


class GesturePhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    DRAGGING = "dragging"
    RESIZING = "resizing"


class GestureKind(str, Enum):
    DRAG = "drag"
    RESIZE = "resize"


class ResizeEdge(str, Enum):
    START = "start"
    END = "end"


@dataclass(frozen=True)
class GestureState:
    phase: GesturePhase = GesturePhase.IDLE
    kind: Optional[GestureKind] = None
    item_id: Optional[str] = None
    origin_lane_id: Optional[str] = None
    hover_lane_id: Optional[str] = None
    edge: Optional[ResizeEdge] = None
    start_date: Optional[str] = None  # item dates captured at press time
    end_date: Optional[str] = None
    origin_x: float = 0.0
    origin_y: float = 0.0
    dx: float = 0.0
    dy: float = 0.0

    @property
    def is_active(self) -> bool:
        return self.phase in (GesturePhase.DRAGGING, GesturePhase.RESIZING)


IDLE = GestureState()


def snap_grid_days(visible_range: VisibleRange) -> int:
    """Snap granularity in days for the current zoom level."""
    span_days = visible_range.width_ms / DAY_MS
    if span_days <= SNAP_DAILY_MAX_DAYS:
        return 1
    if span_days <= SNAP_WEEKLY_MAX_DAYS:
        return 7
    return 30


def snap_offset_days(delta_ms: float, visible_range: VisibleRange) -> int:
    """Round a millisecond delta to a whole multiple of the snap grid, in days."""
    grid = snap_grid_days(visible_range)
    units = delta_ms / (grid * DAY_MS)
    # half away from zero, so dragging left and right behaves symmetrically
    steps = int(math.floor(abs(units) + 0.5))
    return int(math.copysign(steps, units)) * grid if steps else 0


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def press(item: RoadmapItem, x: float, y: float = 0.0) -> GestureState:
    return GestureState(
        phase=GesturePhase.PENDING,
        kind=GestureKind.DRAG,
        item_id=item.id,
        origin_lane_id=item.lane_id,
        hover_lane_id=item.lane_id,
        start_date=item.start_date,
        end_date=item.end_date,
        origin_x=x,
        origin_y=y,
    )


def press_resize(item: RoadmapItem, edge, x: float, y: float = 0.0) -> GestureState:
    """Arm a resize on one edge. Milestones have no edges: stays IDLE."""
    try:
        edge = ResizeEdge(edge)
    except ValueError as e:
        raise GestureError(f"Unknown resize edge: {edge!r}") from e

    if item.is_milestone:
        logger.debug("timeline.gesture.resize_ignored", extra={"item_id": item.id, "reason": "milestone"})
        return IDLE

    return GestureState(
        phase=GesturePhase.PENDING,
        kind=GestureKind.RESIZE,
        item_id=item.id,
        origin_lane_id=item.lane_id,
        hover_lane_id=item.lane_id,
        edge=edge,
        start_date=item.start_date,
        end_date=item.end_date,
        origin_x=x,
        origin_y=y,
    )


def move(
    state: GestureState,
    x: float,
    y: float = 0.0,
    lane_id: Optional[str] = None,
    activation_distance_px: Optional[float] = None,
) -> GestureState:
    """Track the pointer. lane_id is the lane under the pointer, if known."""
    if state.phase == GesturePhase.IDLE:
        return state

    dx = x - state.origin_x
    dy = y - state.origin_y
    updates = {"dx": dx, "dy": dy}
    if lane_id is not None and state.kind == GestureKind.DRAG:
        updates["hover_lane_id"] = lane_id

    if state.phase == GesturePhase.PENDING:
        threshold = (
            activation_distance_px
            if activation_distance_px is not None
            else settings.DRAG_ACTIVATION_DISTANCE_PX
        )
        if math.hypot(dx, dy) >= threshold:
            updates["phase"] = (
                GesturePhase.DRAGGING if state.kind == GestureKind.DRAG else GesturePhase.RESIZING
            )

    return replace(state, **updates)


def cancel(state: GestureState) -> GestureState:
    return IDLE


def release(
    state: GestureState,
    visible_range: VisibleRange,
    width_px: float,
    lane_id: Optional[str] = None,
) -> Tuple[GestureState, Optional[ItemMutation]]:
    """Finish the gesture. Returns (IDLE, mutation or None)."""
    if not state.is_active:
        # released before the activation distance: a click
        return IDLE, None

    drop_lane = lane_id if lane_id is not None else state.hover_lane_id
    offset_days = snap_offset_days(px_delta_to_ms(state.dx, visible_range, width_px), visible_range)

    if state.phase == GesturePhase.DRAGGING:
        mutation = ItemMutation(
            item_id=state.item_id,
            start_date=shift_date_string(state.start_date, offset_days),
            end_date=shift_date_string(state.end_date, offset_days),
            lane_id=drop_lane if drop_lane and drop_lane != state.origin_lane_id else None,
        )
    else:
        start, end = _resized_dates(state, offset_days)
        mutation = ItemMutation(item_id=state.item_id, start_date=start, end_date=end)

    logger.debug(
        "timeline.gesture.release",
        extra={"item_id": state.item_id, "action": state.phase.value, "lane_id": mutation.lane_id},
    )
    return IDLE, mutation


def _resized_dates(state: GestureState, offset_days: int) -> Tuple[str, str]:
    start = parse_date(state.start_date) or date.today()
    end = parse_date(state.end_date) or date.today()
    # an inverted drag leaves a one-day span
    if state.edge == ResizeEdge.START:
        start = min(start + timedelta(days=offset_days), end - timedelta(days=1))
    else:
        end = max(end + timedelta(days=offset_days), start + timedelta(days=1))
    return format_date(start), format_date(end)


# ---------------------------------------------------------------------------
# Commit
# ---------------------------------------------------------------------------

def apply_mutation(artifact: RoadmapArtifact, mutation: ItemMutation) -> RoadmapArtifact:
    """Write a gesture result back into the roadmap (persistence-normalized)."""
    items = []
    found = False
    for it in artifact.items:
        if it.id != mutation.item_id:
            items.append(it)
            continue
        found = True
        update = {"start_date": mutation.start_date, "end_date": mutation.end_date}
        if mutation.lane_id and mutation.lane_id in artifact.lane_ids():
            update["lane_id"] = mutation.lane_id
        items.append(normalize_item_dates(it.model_copy(update=update)))

    if not found:
        logger.warning("timeline.gesture.unknown_item", extra={"item_id": mutation.item_id})
        return artifact
    return artifact.model_copy(update={"items": items})


__all__ = [
    "SNAP_DAILY_MAX_DAYS",
    "SNAP_WEEKLY_MAX_DAYS",
    "GesturePhase",
    "GestureKind",
    "ResizeEdge",
    "GestureState",
    "IDLE",
    "snap_grid_days",
    "snap_offset_days",
    "press",
    "press_resize",
    "move",
    "cancel",
    "release",
    "apply_mutation",
]
