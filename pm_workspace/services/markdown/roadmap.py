# pm_workspace_core/pm_workspace/services/markdown/roadmap.py
"""
Roadmap markdown:

    # Q3 Launch
    **Time Scale:** Monthly

    ## Lanes
    - Frontend (#3b82f6)

    ## Items
    ### Frontend
    - [feature] Onboarding flow (2026-07-01 → 2026-07-14) [in_progress]
      Optional description, indented.

Parsed ids are positional (lane-1.., item-1..) so parsing the same text twice
gives the same artifact; real ids are reconciled by the persistence layer.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence

from pm_workspace.config import settings
from pm_workspace.schemas.documents import ExtraSection, ParsedRoadmap
from pm_workspace.schemas.roadmap import ItemStatus, ItemType, RoadmapArtifact, RoadmapItem, RoadmapLane, TimeScale
from pm_workspace.services.markdown.fields import FieldKind, FieldSpec, collect_fields, serialize_fields
from pm_workspace.services.timeline.lanes import next_lane_color, repair_lane_references

logger = logging.getLogger(__name__)

ROADMAP_FIELDS: List[FieldSpec] = [
    FieldSpec("title", FieldKind.H1_TITLE),
    FieldSpec("time_scale", FieldKind.BOLD_FIELD, "Time Scale", always=True),
    FieldSpec("lanes", FieldKind.SECTION_TEXT, "Lanes", always=True),
    FieldSpec("items", FieldKind.SECTION_TEXT, "Items", always=True),
]

DEFAULT_LANE_NAME = "General"

_LANE_RE = re.compile(r"^\s*-\s+(.+?)(?:\s+\((#[0-9a-fA-F]{3,8})\))?\s*$")
_LANE_HEADING_RE = re.compile(r"^###\s+(.+?)\s*$")
_ITEM_RE = re.compile(
    r"^-\s+\[([\w -]+)\]\s+(.+?)\s+"
    r"\((\d{4}-\d{2}-\d{2})(?:\s*(?:→|->)\s*(\d{4}-\d{2}-\d{2}))?\)"
    r"(?:\s+\[([\w -]+)\])?\s*$"
)


def _scale_label(scale: TimeScale) -> str:
    return scale.value.capitalize()


def _parse_scale(text: str) -> TimeScale:
    try:
        return TimeScale((text or "").strip().lower())
    except ValueError:
        return TimeScale(settings.DEFAULT_TIME_SCALE)


def _parse_code(enum_cls, text: Optional[str], default):
    code = (text or "").strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return enum_cls(code)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Serialize
# ---------------------------------------------------------------------------

def _item_line(item: RoadmapItem) -> str:
    if item.is_milestone:
        dates = f"({item.start_date})"
    else:
        dates = f"({item.start_date} → {item.end_date})"
    return f"- [{item.type.value}] {item.title} {dates} [{item.status.value}]"


def roadmap_to_markdown(roadmap: RoadmapArtifact, extra_sections: Sequence[ExtraSection] = ()) -> str:
    roadmap = repair_lane_references(roadmap)

    lane_lines = [f"- {lane.name} ({lane.color})" for lane in roadmap.lanes]
    item_lines: List[str] = []
    for lane in roadmap.lanes:
        lane_items = roadmap.items_in_lane(lane.id)
        if not lane_items:
            continue
        if item_lines:
            item_lines.append("")
        item_lines.append(f"### {lane.name}")
        for item in lane_items:
            item_lines.append(_item_line(item))
            if item.description:
                item_lines.extend(f"  {line}".rstrip() for line in item.description.splitlines())

    values = {
        "title": roadmap.title,
        "time_scale": _scale_label(roadmap.time_scale),
        "lanes": "\n".join(lane_lines),
        "items": "\n".join(item_lines),
    }
    return serialize_fields(values, ROADMAP_FIELDS, extra_sections)


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------

def _parse_lanes(body: str) -> List[RoadmapLane]:
    lanes: List[RoadmapLane] = []
    for line in (body or "").splitlines():
        match = _LANE_RE.match(line)
        if not match:
            continue
        lanes.append(
            RoadmapLane(
                id=f"lane-{len(lanes) + 1}",
                name=match.group(1).strip(),
                color=match.group(2) or next_lane_color(len(lanes)),
            )
        )
    return lanes


def _find_or_create_lane(lanes: List[RoadmapLane], name: str) -> RoadmapLane:
    for lane in lanes:
        if lane.name == name:
            return lane
    for lane in lanes:
        if lane.name.lower() == name.lower():
            return lane
    lane = RoadmapLane(id=f"lane-{len(lanes) + 1}", name=name, color=next_lane_color(len(lanes)))
    lanes.append(lane)
    logger.debug("markdown.roadmap.lane_created", extra={"lane_id": lane.id})
    return lane


def _parse_items(body: str, lanes: List[RoadmapLane]) -> List[dict]:
    """Item field dicts, each tagged with its lane; ids are assigned by the caller."""
    rows: List[dict] = []
    lane: Optional[RoadmapLane] = None
    current: Optional[dict] = None

    for line in (body or "").splitlines():
        heading = _LANE_HEADING_RE.match(line)
        if heading:
            lane = _find_or_create_lane(lanes, heading.group(1))
            current = None
            continue

        match = _ITEM_RE.match(line)
        if match:
            if lane is None:
                lane = lanes[0] if lanes else _find_or_create_lane(lanes, DEFAULT_LANE_NAME)
            item_type = _parse_code(ItemType, match.group(1), ItemType.FEATURE)
            start = match.group(3)
            end = match.group(4) or start
            current = {
                "title": match.group(2).strip(),
                "lane_id": lane.id,
                "start_date": start,
                "end_date": start if item_type == ItemType.MILESTONE else end,
                "type": item_type,
                "status": _parse_code(ItemStatus, match.group(5), ItemStatus.NOT_STARTED),
                "description_lines": [],
            }
            rows.append(current)
            continue

        if current is not None and line[:1].isspace() and line.strip():
            current["description_lines"].append(line.strip())
        elif line.strip():
            logger.debug("markdown.roadmap.line_ignored", extra={"reason": line.strip()[:80]})

    return rows


def parse_roadmap_markdown(content: str) -> ParsedRoadmap:
    values, extras = collect_fields(content, ROADMAP_FIELDS)

    lanes = _parse_lanes(values.get("lanes", ""))
    rows = _parse_items(values.get("items", ""), lanes)

    order = {lane.id: i for i, lane in enumerate(lanes)}
    rows.sort(key=lambda r: order[r["lane_id"]])

    items: List[RoadmapItem] = []
    for i, row in enumerate(rows, start=1):
        description = "\n".join(row.pop("description_lines")) or None
        items.append(RoadmapItem(id=f"item-{i}", description=description, **row))

    roadmap = RoadmapArtifact(
        title=values.get("title", ""),
        time_scale=_parse_scale(values.get("time_scale", "")),
        lanes=lanes,
        items=items,
    )
    return ParsedRoadmap(roadmap=roadmap, extra_sections=extras)


__all__ = ["ROADMAP_FIELDS", "roadmap_to_markdown", "parse_roadmap_markdown"]
