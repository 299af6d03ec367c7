from .fields import FieldKind, FieldSpec, parse_fields, serialize_fields
from .documents import (
    parse_plan_markdown,
    plan_to_markdown,
    parse_prd_markdown,
    prd_to_markdown,
    parse_persona_markdown,
    persona_to_markdown,
    parse_competitor_markdown,
    competitor_to_markdown,
)
from .roadmap import roadmap_to_markdown, parse_roadmap_markdown
from .feature_tree import (
    feature_tree_to_markdown,
    feature_tree_content_markdown,
    parse_feature_tree_markdown,
    priorities_to_markdown,
)

__all__ = [
    "FieldKind",
    "FieldSpec",
    "parse_fields",
    "serialize_fields",
    "parse_plan_markdown",
    "plan_to_markdown",
    "parse_prd_markdown",
    "prd_to_markdown",
    "parse_persona_markdown",
    "persona_to_markdown",
    "parse_competitor_markdown",
    "competitor_to_markdown",
    "roadmap_to_markdown",
    "parse_roadmap_markdown",
    "feature_tree_to_markdown",
    "feature_tree_content_markdown",
    "parse_feature_tree_markdown",
    "priorities_to_markdown",
]
