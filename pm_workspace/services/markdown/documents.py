# pm_workspace_core/pm_workspace/services/markdown/documents.py
"""
Plan, PRD, persona and competitor markdown <-> Parsed* models.

Plans and PRDs are heading documents ("# Title" + "## Section" blocks);
personas and competitors are cards ("## Name" + bold-labelled fields).
"""
from __future__ import annotations

from typing import List

from pm_workspace.schemas.documents import ParsedCompetitor, ParsedPersona, ParsedPlan, ParsedPrd
from pm_workspace.services.markdown.fields import FieldKind, FieldSpec, parse_fields, serialize_fields

PLAN_FIELDS: List[FieldSpec] = [
    FieldSpec("title", FieldKind.H1_TITLE),
    FieldSpec("problem_statement", FieldKind.SECTION_TEXT, "Problem Statement", always=True),
    FieldSpec("target_users", FieldKind.SECTION_LIST, "Target Users"),
    FieldSpec("proposed_solution", FieldKind.SECTION_TEXT, "Proposed Solution", always=True),
    FieldSpec("technical_approach", FieldKind.SECTION_TEXT, "Technical Approach", always=True),
    FieldSpec("success_metrics", FieldKind.SECTION_LIST, "Success Metrics"),
    FieldSpec("risks", FieldKind.SECTION_LIST, "Risks"),
    FieldSpec("timeline", FieldKind.SECTION_TEXT, "Timeline", always=True),
]

PRD_FIELDS: List[FieldSpec] = [
    FieldSpec("title", FieldKind.H1_TITLE),
    FieldSpec("overview", FieldKind.SECTION_TEXT, "Overview", always=True),
    FieldSpec("user_stories", FieldKind.SECTION_LIST, "User Stories"),
    FieldSpec("acceptance_criteria", FieldKind.SECTION_LIST, "Acceptance Criteria"),
    FieldSpec("technical_constraints", FieldKind.SECTION_LIST, "Technical Constraints"),
    FieldSpec("out_of_scope", FieldKind.SECTION_LIST, "Out of Scope"),
    FieldSpec("success_metrics", FieldKind.SECTION_LIST, "Success Metrics"),
    FieldSpec("dependencies", FieldKind.SECTION_LIST, "Dependencies"),
]

PERSONA_FIELDS: List[FieldSpec] = [
    FieldSpec("name", FieldKind.H2_TITLE),
    FieldSpec("demographics", FieldKind.BOLD_FIELD, "Demographics", always=True),
    FieldSpec("tech_proficiency", FieldKind.BOLD_FIELD, "Tech Proficiency", always=True),
    FieldSpec("quote", FieldKind.BLOCKQUOTE),
    FieldSpec("goals", FieldKind.BOLD_LIST, "Goals"),
    FieldSpec("frustrations", FieldKind.BOLD_LIST, "Frustrations"),
    FieldSpec("behaviors", FieldKind.BOLD_LIST, "Behaviors"),
    FieldSpec("decision_making_context", FieldKind.BOLD_TEXT, "Decision-Making Context"),
]

COMPETITOR_FIELDS: List[FieldSpec] = [
    FieldSpec("name", FieldKind.H2_TITLE),
    FieldSpec("url", FieldKind.BOLD_FIELD, "URL"),
    FieldSpec("positioning", FieldKind.BOLD_FIELD, "Positioning", always=True),
    FieldSpec("pricing", FieldKind.BOLD_FIELD, "Pricing"),
    FieldSpec("strengths", FieldKind.BOLD_LIST, "Strengths"),
    FieldSpec("weaknesses", FieldKind.BOLD_LIST, "Weaknesses"),
    FieldSpec("feature_gaps", FieldKind.BOLD_LIST, "Feature Gaps"),
]


def parse_plan_markdown(content: str) -> ParsedPlan:
    return parse_fields(content, PLAN_FIELDS, ParsedPlan)


def plan_to_markdown(plan: ParsedPlan) -> str:
    return serialize_fields(plan.model_dump(), PLAN_FIELDS, plan.extra_sections)


def parse_prd_markdown(content: str) -> ParsedPrd:
    return parse_fields(content, PRD_FIELDS, ParsedPrd)


def prd_to_markdown(prd: ParsedPrd) -> str:
    return serialize_fields(prd.model_dump(), PRD_FIELDS, prd.extra_sections)


def parse_persona_markdown(content: str) -> ParsedPersona:
    return parse_fields(content, PERSONA_FIELDS, ParsedPersona)


def persona_to_markdown(persona: ParsedPersona) -> str:
    return serialize_fields(persona.model_dump(), PERSONA_FIELDS, persona.extra_sections)


def parse_competitor_markdown(content: str) -> ParsedCompetitor:
    return parse_fields(content, COMPETITOR_FIELDS, ParsedCompetitor)


def competitor_to_markdown(competitor: ParsedCompetitor) -> str:
    return serialize_fields(competitor.model_dump(), COMPETITOR_FIELDS, competitor.extra_sections)


__all__ = [
    "PLAN_FIELDS",
    "PRD_FIELDS",
    "PERSONA_FIELDS",
    "COMPETITOR_FIELDS",
    "parse_plan_markdown",
    "plan_to_markdown",
    "parse_prd_markdown",
    "prd_to_markdown",
    "parse_persona_markdown",
    "persona_to_markdown",
    "parse_competitor_markdown",
    "competitor_to_markdown",
]
