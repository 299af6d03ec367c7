from .roadmap import (
	TimeScale,
	ItemStatus,
	ItemType,
	RoadmapLane,
	RoadmapItem,
	RoadmapArtifact,
	TimelineSpan,
	VisibleRange,
	ItemMutation,
)
from .features import FeatureNode, FeatureTreeArtifact, FlatFeature
from .documents import (
	ExtraSectionStyle,
	ExtraSection,
	ParsedPlan,
	ParsedPrd,
	ParsedPersona,
	ParsedCompetitor,
	ParsedRoadmap,
)
from .records import (
	DbTimeScale,
	DbItemStatus,
	DbItemType,
	LaneRecord,
	ItemRecord,
	RoadmapRecord,
	FeatureRecord,
	LaneSyncInput,
	ItemSyncInput,
	RoadmapSyncInput,
	FlatFeatureInput,
	RoadmapItemPatch,
	RoadmapOperation,
)

__all__ = [
	"TimeScale",
	"ItemStatus",
	"ItemType",
	"RoadmapLane",
	"RoadmapItem",
	"RoadmapArtifact",
	"TimelineSpan",
	"VisibleRange",
	"ItemMutation",
	"FeatureNode",
	"FeatureTreeArtifact",
	"FlatFeature",
	"ExtraSectionStyle",
	"ExtraSection",
	"ParsedPlan",
	"ParsedPrd",
	"ParsedPersona",
	"ParsedCompetitor",
	"ParsedRoadmap",
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
