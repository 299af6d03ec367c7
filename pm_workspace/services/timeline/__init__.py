from .conversion import (
    item_to_timeline_span,
    span_to_date_strings,
    normalize_item_dates,
    ms_to_px,
    px_to_ms,
    px_delta_to_ms,
    pan_range,
    zoom_range,
)
from .time_scale import (
    best_time_scale,
    effective_time_scale,
    compute_time_range,
    compute_initial_range,
    range_for_scale,
)
from .columns import TimeColumn, generate_time_columns, columns_for_range
from .packing import PackEntry, SubRow, LaneLayout, pack_lane, max_concurrency, layout_lanes
from .gestures import (
    GesturePhase,
    GestureState,
    ResizeEdge,
    IDLE,
    snap_grid_days,
    press,
    press_resize,
    move,
    release,
    cancel,
    apply_mutation,
)
from .lanes import add_lane, rename_lane, delete_lane, repair_lane_references
from .operations import import_features, apply_roadmap_operations, RoadmapPulse, roadmap_pulse

__all__ = [
    "item_to_timeline_span",
    "span_to_date_strings",
    "normalize_item_dates",
    "ms_to_px",
    "px_to_ms",
    "px_delta_to_ms",
    "pan_range",
    "zoom_range",
    "best_time_scale",
    "effective_time_scale",
    "compute_time_range",
    "compute_initial_range",
    "range_for_scale",
    "TimeColumn",
    "generate_time_columns",
    "columns_for_range",
    "PackEntry",
    "SubRow",
    "LaneLayout",
    "pack_lane",
    "max_concurrency",
    "layout_lanes",
    "GesturePhase",
    "GestureState",
    "ResizeEdge",
    "IDLE",
    "snap_grid_days",
    "press",
    "press_resize",
    "move",
    "release",
    "cancel",
    "apply_mutation",
    "add_lane",
    "rename_lane",
    "delete_lane",
    "repair_lane_references",
    "import_features",
    "apply_roadmap_operations",
    "RoadmapPulse",
    "roadmap_pulse",
]
