# pm_workspace_core/pm_workspace/schemas/roadmap.py

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class TimeScale(str, Enum):
    """Column granularity of a roadmap timeline."""
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class ItemStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"


class ItemType(str, Enum):
    FEATURE = "feature"
    GOAL = "goal"
    MILESTONE = "milestone"


class RoadmapLane(BaseModel):
    id: str
    name: str
    color: str


class RoadmapItem(BaseModel):
    """One schedulable unit on the roadmap.

    Dates are calendar days (YYYY-MM-DD), both inclusive. Milestones carry
    end_date == start_date once normalized for persistence.
    """
    id: str
    title: str
    description: Optional[str] = None
    lane_id: str
    start_date: str
    end_date: str
    status: ItemStatus = ItemStatus.NOT_STARTED
    type: ItemType = ItemType.FEATURE
    source_feature_id: Optional[str] = None  # breadcrumb of the feature it was imported from
    color: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        s = str(v).strip()
        return s or None

    @property
    def is_milestone(self) -> bool:
        return self.type == ItemType.MILESTONE


class RoadmapArtifact(BaseModel):
    """Aggregate root: lanes plus the items placed in them.

    time_scale is the stored default; the live column density is derived from
    the visible range (see services.timeline.time_scale.effective_time_scale).
    """
    id: Optional[str] = None
    title: str
    time_scale: TimeScale = TimeScale.MONTHLY
    lanes: List[RoadmapLane] = Field(default_factory=list)
    items: List[RoadmapItem] = Field(default_factory=list)

    def lane_ids(self) -> List[str]:
        return [lane.id for lane in self.lanes]

    def items_in_lane(self, lane_id: str) -> List[RoadmapItem]:
        return [it for it in self.items if it.lane_id == lane_id]


class TimelineSpan(BaseModel):
    """Millisecond [start, end) position of an item on the timeline."""
    start: int
    end: int

    model_config = {"frozen": True}


class VisibleRange(BaseModel):
    """What the viewport currently shows, in epoch milliseconds."""
    start: int
    end: int

    model_config = {"frozen": True}

    @property
    def width_ms(self) -> int:
        return self.end - self.start


class ItemMutation(BaseModel):
    """Single committed change produced by a drag or resize gesture."""
    item_id: str
    start_date: str = Field(..., pattern=DATE_PATTERN)
    end_date: str = Field(..., pattern=DATE_PATTERN)
    lane_id: Optional[str] = None


__all__ = [
    "DATE_PATTERN",
    "TimeScale",
    "ItemStatus",
    "ItemType",
    "RoadmapLane",
    "RoadmapItem",
    "RoadmapArtifact",
    "TimelineSpan",
    "VisibleRange",
    "ItemMutation",
]
