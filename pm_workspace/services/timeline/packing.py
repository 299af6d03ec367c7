# pm_workspace_core/pm_workspace/services/timeline/packing.py
"""
Sub-row packing inside a lane.

Greedy interval colouring over [start, end) spans: entries are visited in
start order (ties keep input order) and each goes to the first sub-row whose
last end is <= its start, otherwise a new sub-row is opened. For interval
graphs this uses exactly max_concurrency(entries) sub-rows.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pm_workspace.config import settings
from pm_workspace.exceptions import LanePackingError
from pm_workspace.schemas.roadmap import RoadmapArtifact, RoadmapLane
from pm_workspace.services.timeline.conversion import item_to_timeline_span

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackEntry:
    item_id: str
    start: int
    end: int  # exclusive


@dataclass
class SubRow:
    index: int
    entries: List[PackEntry] = field(default_factory=list)

    @property
    def last_end(self) -> Optional[int]:
        return self.entries[-1].end if self.entries else None


def _prepared(entries: Iterable[PackEntry]) -> List[PackEntry]:
    """Reject inverted spans; a zero-length span occupies its start millisecond."""
    out: List[PackEntry] = []
    for e in entries:
        if e.end < e.start:
            raise LanePackingError(f"span for item {e.item_id!r} ends before it starts ({e.end} < {e.start})")
        out.append(e if e.end > e.start else PackEntry(item_id=e.item_id, start=e.start, end=e.start + 1))
    return out


def pack_lane(entries: Sequence[PackEntry]) -> List[SubRow]:
    ordered = sorted(enumerate(_prepared(entries)), key=lambda pair: (pair[1].start, pair[0]))

    rows: List[SubRow] = []
    for _, entry in ordered:
        target = next((r for r in rows if r.last_end is not None and r.last_end <= entry.start), None)
        if target is None:
            target = SubRow(index=len(rows))
            rows.append(target)
        target.entries.append(entry)
    return rows


def max_concurrency(entries: Sequence[PackEntry]) -> int:
    """Largest number of spans covering one instant (sweep line, ends before starts)."""
    points: List[Tuple[int, int]] = []
    for e in _prepared(entries):
        points.append((e.start, +1))
        points.append((e.end, -1))
    # -1 sorts before +1 at the same instant, so touching spans do not overlap
    points.sort()

    active = best = 0
    for _, delta in points:
        active += delta
        best = max(best, active)
    return best


@dataclass
class LaneLayout:
    lane: RoadmapLane
    sub_rows: List[SubRow]
    height_px: int

    @property
    def row_of(self) -> Dict[str, int]:
        return {e.item_id: row.index for row in self.sub_rows for e in row.entries}


def layout_lanes(artifact: RoadmapArtifact, row_height_px: Optional[int] = None) -> List[LaneLayout]:
    """Pack every lane, in lane order, using the rendered (milestone-widened) spans."""
    row_height = row_height_px if row_height_px is not None else settings.ROW_HEIGHT_PX
    layouts: List[LaneLayout] = []
    for lane in artifact.lanes:
        entries = []
        for item in artifact.items_in_lane(lane.id):
            span = item_to_timeline_span(item)
            entries.append(PackEntry(item_id=item.id, start=span.start, end=span.end))
        rows = pack_lane(entries)
        layouts.append(LaneLayout(lane=lane, sub_rows=rows, height_px=max(1, len(rows)) * row_height))

    logger.debug(
        "timeline.layout.done",
        extra={"roadmap_id": artifact.id, "count": len(layouts), "total": len(artifact.items)},
    )
    return layouts


__all__ = ["PackEntry", "SubRow", "pack_lane", "max_concurrency", "LaneLayout", "layout_lanes"]
