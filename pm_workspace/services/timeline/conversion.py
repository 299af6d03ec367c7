# pm_workspace_core/pm_workspace/services/timeline/conversion.py
"""
Temporal conversion between roadmap items, millisecond spans and the pixel
space of the visible range.

The +1 day widening applied to zero-length spans is a rendering concern
only; nothing here writes back to the item.
"""
from __future__ import annotations

from typing import Dict, Optional

from pm_workspace.schemas.roadmap import ItemType, RoadmapItem, TimelineSpan, VisibleRange
from pm_workspace.utils.dates import DAY_MS, date_string_to_ms, ms_to_date_string


def item_to_timeline_span(item: RoadmapItem) -> TimelineSpan:
    start = date_string_to_ms(item.start_date)
    end = date_string_to_ms(item.end_date)
    # milestones (and any inverted item) still need a visible width
    if end <= start:
        end = start + DAY_MS
    return TimelineSpan(start=start, end=end)


def span_to_date_strings(span: TimelineSpan) -> Dict[str, str]:
    return {
        "start_date": ms_to_date_string(span.start),
        "end_date": ms_to_date_string(span.end),
    }


def normalize_item_dates(item: RoadmapItem) -> RoadmapItem:
    """Persistence-side normalization.

    Milestones are stored with end_date == start_date; other items get
    end_date raised to start_date if inverted.
    """
    if item.type == ItemType.MILESTONE:
        if item.end_date != item.start_date:
            return item.model_copy(update={"end_date": item.start_date})
        return item
    if item.end_date < item.start_date:
        return item.model_copy(update={"end_date": item.start_date})
    return item


# ---------------------------------------------------------------------------
# Visible range <-> pixels
# ---------------------------------------------------------------------------

def ms_per_px(visible_range: VisibleRange, width_px: float) -> float:
    if width_px <= 0:
        raise ValueError("width_px must be > 0")
    return visible_range.width_ms / width_px


def ms_to_px(ms: int, visible_range: VisibleRange, width_px: float) -> float:
    return (ms - visible_range.start) / ms_per_px(visible_range, width_px)


def px_to_ms(px: float, visible_range: VisibleRange, width_px: float) -> int:
    return int(round(visible_range.start + px * ms_per_px(visible_range, width_px)))


def px_delta_to_ms(dx_px: float, visible_range: VisibleRange, width_px: float) -> float:
    return dx_px * ms_per_px(visible_range, width_px)


def pan_range(visible_range: VisibleRange, delta_ms: int) -> VisibleRange:
    return VisibleRange(start=visible_range.start + delta_ms, end=visible_range.end + delta_ms)


def zoom_range(
    visible_range: VisibleRange,
    factor: float,
    anchor_ms: Optional[int] = None,
) -> VisibleRange:
    """Scale the visible width by factor (>1 zooms out) keeping anchor_ms fixed on screen.

    The resulting width never drops below one day.
    """
    if factor <= 0:
        raise ValueError("zoom factor must be > 0")
    width = visible_range.width_ms
    anchor = anchor_ms if anchor_ms is not None else visible_range.start + width // 2
    new_width = max(DAY_MS, int(round(width * factor)))
    ratio = (anchor - visible_range.start) / width if width else 0.5
    start = int(round(anchor - ratio * new_width))
    return VisibleRange(start=start, end=start + new_width)


__all__ = [
    "item_to_timeline_span",
    "span_to_date_strings",
    "normalize_item_dates",
    "ms_per_px",
    "ms_to_px",
    "px_to_ms",
    "px_delta_to_ms",
    "pan_range",
    "zoom_range",
]
