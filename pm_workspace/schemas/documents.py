# pm_workspace_core/pm_workspace/schemas/documents.py

"""Structured shapes produced by the markdown parsers.

Each parsed document keeps the blocks it does not recognise in
``extra_sections`` so a parse/serialize round trip never drops content.
"""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from pm_workspace.schemas.roadmap import RoadmapArtifact


class ExtraSectionStyle(str, Enum):
    HEADING = "heading"  # "## Label" section
    BOLD = "bold"  # "**Label:**" block


class ExtraSection(BaseModel):
    label: str
    content: str = ""
    style: ExtraSectionStyle = ExtraSectionStyle.BOLD
    inline: bool = False  # bold block whose content started on the label line


class ParsedPlan(BaseModel):
    title: str = ""
    problem_statement: str = ""
    target_users: List[str] = Field(default_factory=list)
    proposed_solution: str = ""
    technical_approach: str = ""
    success_metrics: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    timeline: str = ""
    extra_sections: List[ExtraSection] = Field(default_factory=list)


class ParsedPrd(BaseModel):
    title: str = ""
    overview: str = ""
    user_stories: List[str] = Field(default_factory=list)
    acceptance_criteria: List[str] = Field(default_factory=list)
    technical_constraints: List[str] = Field(default_factory=list)
    out_of_scope: List[str] = Field(default_factory=list)
    success_metrics: List[str] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    extra_sections: List[ExtraSection] = Field(default_factory=list)


class ParsedPersona(BaseModel):
    name: str = ""
    demographics: str = ""
    tech_proficiency: str = ""
    quote: str = ""
    goals: List[str] = Field(default_factory=list)
    frustrations: List[str] = Field(default_factory=list)
    behaviors: List[str] = Field(default_factory=list)
    decision_making_context: str = ""
    extra_sections: List[ExtraSection] = Field(default_factory=list)


class ParsedCompetitor(BaseModel):
    name: str = ""
    url: str = ""
    positioning: str = ""
    pricing: str = ""
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    feature_gaps: List[str] = Field(default_factory=list)
    extra_sections: List[ExtraSection] = Field(default_factory=list)


class ParsedRoadmap(BaseModel):
    roadmap: RoadmapArtifact
    extra_sections: List[ExtraSection] = Field(default_factory=list)


__all__ = [
    "ExtraSectionStyle",
    "ExtraSection",
    "ParsedPlan",
    "ParsedPrd",
    "ParsedPersona",
    "ParsedCompetitor",
    "ParsedRoadmap",
]
