# pm_workspace_core/pm_workspace/exceptions.py

from __future__ import annotations


class LanePackingError(ValueError):
    """Raised when a span reaching the lane packer has end < start.

    Spans produced by item_to_timeline_span are always strictly positive, so
    this signals an integration defect upstream rather than bad user data.
    """


class GestureError(ValueError):
    """Raised for gesture requests the state machine cannot represent."""


__all__ = ["LanePackingError", "GestureError"]
