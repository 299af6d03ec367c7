# pm_workspace_core/pm_workspace/schemas/records.py

"""Boundary shapes exchanged with the persistence and AI-tool layers.

Inbound records and outbound sync payloads use camelCase keys on the wire;
the models accept either spelling and dump camelCase with ``by_alias=True``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing_extensions import Literal

from pm_workspace.schemas.roadmap import ItemStatus, ItemType


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DbTimeScale(str, Enum):
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"


class DbItemStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    DONE = "DONE"


class DbItemType(str, Enum):
    FEATURE = "FEATURE"
    GOAL = "GOAL"
    MILESTONE = "MILESTONE"


# ---------------------------------------------------------------------------
# Inbound: persistence -> core
# ---------------------------------------------------------------------------

class LaneRecord(_WireModel):
    id: str
    name: str
    color: str
    order: int = 0


class ItemRecord(_WireModel):
    id: str
    title: str
    description: Optional[str] = None
    status: str = DbItemStatus.NOT_STARTED.value  # kept as str: unknown codes fall back on conversion
    type: str = DbItemType.FEATURE.value
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    lane_id: Optional[str] = None
    feature_id: Optional[str] = None
    color: Optional[str] = None
    order: int = 0


class RoadmapRecord(_WireModel):
    id: str
    title: str
    description: Optional[str] = None
    time_scale: str = DbTimeScale.MONTHLY.value
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    lanes: List[LaneRecord] = Field(default_factory=list)
    items: List[ItemRecord] = Field(default_factory=list)


class FeatureRecord(_WireModel):
    id: str
    title: str
    description: Optional[str] = None
    rice_reach: Optional[float] = None
    rice_impact: Optional[float] = None
    rice_confidence: Optional[float] = None
    rice_effort: Optional[float] = None
    rice_score: Optional[float] = None
    order: int = 0
    children: Optional[List["FeatureRecord"]] = None


FeatureRecord.model_rebuild()


# ---------------------------------------------------------------------------
# Outbound: core -> persistence ("sync" call)
# ---------------------------------------------------------------------------

class LaneSyncInput(_WireModel):
    client_id: str
    name: str
    color: str
    order: int


class ItemSyncInput(_WireModel):
    client_id: str
    title: str
    description: Optional[str] = None
    lane_client_id: str
    start_date: str
    end_date: str
    status: DbItemStatus
    type: DbItemType
    color: Optional[str] = None
    order: int


class RoadmapSyncInput(_WireModel):
    title: str
    time_scale: DbTimeScale
    lanes: List[LaneSyncInput] = Field(default_factory=list)
    items: List[ItemSyncInput] = Field(default_factory=list)


class FlatFeatureInput(_WireModel):
    """One feature row for tree sync; parent_db_id + order rebuild the tree."""
    db_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    reach: Optional[float] = None
    impact: Optional[float] = None
    confidence: Optional[float] = None
    effort: Optional[float] = None
    parent_db_id: Optional[str] = None
    order: int


# ---------------------------------------------------------------------------
# AI-tool layer: proposed roadmap operations
# ---------------------------------------------------------------------------

def _normalize_code(v):
    if v is None or isinstance(v, Enum):
        return v
    s = str(v).strip().lower().replace("-", "_").replace(" ", "_")
    return s or None


class RoadmapItemPatch(_WireModel):
    """Partial item fields; omitted fields stay untouched (update) or default (add)."""
    id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    lane_id: Optional[str] = None  # lane id or lane name
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    status: Optional[ItemStatus] = None
    type: Optional[ItemType] = None
    color: Optional[str] = None

    @field_validator("status", "type", mode="before")
    @classmethod
    def normalize_code(cls, v):
        return _normalize_code(v)


class RoadmapOperation(_WireModel):
    action: Literal["add", "update", "remove"]
    item: RoadmapItemPatch = Field(default_factory=RoadmapItemPatch)

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, v):
        return str(v).strip().lower() if v is not None else v


__all__ = [
    "DbTimeScale",
    "DbItemStatus",
    "DbItemType",
    "LaneRecord",
    "ItemRecord",
    "RoadmapRecord",
    "FeatureRecord",
    "LaneSyncInput",
    "ItemSyncInput",
    "RoadmapSyncInput",
    "FlatFeatureInput",
    "RoadmapItemPatch",
    "RoadmapOperation",
]
