# pm_workspace_core/pm_workspace/services/markdown/feature_tree.py
"""
Feature tree markdown and the RICE priority table.

    # Root feature

    - Checkout [R:5000 I:2 C:80% E:3w]
      Faster, one-page checkout.
      - Saved cards [R:3000 I:1 C:100% E:1w]

Bullets nest by two spaces; non-bullet lines indented under a bullet are
its description. A description line that itself starts with "- " is read
as a child, which is a known limitation of the format.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pm_workspace.schemas.features import FeatureNode, FeatureTreeArtifact
from pm_workspace.services.markdown.extract import H1_RE
from pm_workspace.services.scoring.feature_tree import format_number, impact_label, rank_leaves

logger = logging.getLogger(__name__)

INDENT = "  "

_BULLET_RE = re.compile(r"^(\s*)-\s+(.*?)\s*$")
_TAG_RE = re.compile(r"\s*\[((?:[RICE]:[^\s\]]+\s*)+)\]\s*$")

# tag key -> (attribute, suffix, min, max)
_TAG_FIELDS: Dict[str, Tuple[str, str, float, Optional[float]]] = {
    "R": ("reach", "", 0.0, None),
    "I": ("impact", "", 0.0, None),
    "C": ("confidence", "%", 0.0, 100.0),
    "E": ("effort", "w", 0.0, None),
}


# ---------------------------------------------------------------------------
# Serialize
# ---------------------------------------------------------------------------

def rice_tag(node: FeatureNode) -> str:
    parts = []
    for key, (attr, suffix, _, _) in _TAG_FIELDS.items():
        value = getattr(node, attr)
        if value is not None:
            parts.append(f"{key}:{format_number(value)}{suffix}")
    return f" [{' '.join(parts)}]" if parts else ""


def _append_node(lines: List[str], node: FeatureNode, depth: int) -> None:
    indent = INDENT * depth
    lines.append(f"{indent}- {node.title}{rice_tag(node)}")
    if node.description:
        for line in node.description.splitlines():
            lines.append(f"{indent}{INDENT}{line}".rstrip())
    for child in node.children or []:
        _append_node(lines, child, depth + 1)


def feature_tree_content_markdown(root_feature: str, children: Sequence[FeatureNode]) -> str:
    lines: List[str] = [f"# {root_feature}", ""]
    for node in children:
        _append_node(lines, node, 0)
    return "\n".join(lines)


def feature_tree_to_markdown(tree: FeatureTreeArtifact) -> str:
    """Stored content when present, otherwise generated from the tree."""
    if tree.content is not None and tree.content.strip():
        return tree.content
    return feature_tree_content_markdown(tree.root_feature, tree.children)


def priorities_to_markdown(tree: FeatureTreeArtifact) -> str:
    lines = [
        f"# {tree.root_feature} — Priority Matrix (RICE)",
        "",
        "| Feature | Reach | Impact | Confidence | Effort | RICE Score |",
        "|---------|-------|--------|------------|--------|------------|",
    ]
    for f in rank_leaves(tree.children):
        node = f.node
        reach = format_number(node.reach) if node.reach is not None else "—"
        confidence = f"{format_number(node.confidence)}%" if node.confidence is not None else "—"
        effort = f"{format_number(node.effort)}w" if node.effort is not None else "—"
        score = f"{f.rice_score:.1f}" if f.rice_score is not None else "—"
        lines.append(
            f"| {f.breadcrumb} | {reach} | {impact_label(node.impact)} | {confidence} | {effort} | {score} |"
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------

def _parse_tag(title: str) -> Tuple[str, Dict[str, Any]]:
    match = _TAG_RE.search(title)
    if not match:
        return title.strip(), {}

    values: Dict[str, Any] = {}
    for token in match.group(1).split():
        key, _, raw = token.partition(":")
        attr, suffix, lo, hi = _TAG_FIELDS[key]
        raw = raw[: -len(suffix)] if suffix and raw.endswith(suffix) else raw
        try:
            value = float(raw)
        except ValueError:
            logger.warning("markdown.feature_tree.bad_tag", extra={"reason": token})
            continue
        if value < lo or (hi is not None and value > hi):
            logger.warning("markdown.feature_tree.tag_out_of_range", extra={"reason": token})
            continue
        values[attr] = value
    return title[: match.start()].strip(), values


def parse_feature_tree_markdown(content: str) -> FeatureTreeArtifact:
    """Inverse of feature_tree_content_markdown. Keeps ``content`` as given."""
    root_feature = ""
    top: List[Dict[str, Any]] = []
    # (indent width, node dict) for the open path
    stack: List[Tuple[int, Dict[str, Any]]] = []

    for raw in (content or "").splitlines():
        line = raw.rstrip()
        if not line.strip():
            continue
        if not root_feature and not stack:
            h1 = H1_RE.match(line)
            if h1:
                root_feature = h1.group(1)
                continue

        bullet = _BULLET_RE.match(line)
        if bullet:
            width = len(bullet.group(1).expandtabs(len(INDENT)))
            title, rice = _parse_tag(bullet.group(2))
            node = {"title": title, "children": [], "description_lines": [], **rice}
            while stack and stack[-1][0] >= width:
                stack.pop()
            (stack[-1][1]["children"] if stack else top).append(node)
            stack.append((width, node))
        elif stack:
            stack[-1][1]["description_lines"].append(line.strip())

    return FeatureTreeArtifact(
        root_feature=root_feature,
        children=[_to_node(n) for n in top],
        content=content,
    )


def _to_node(data: Dict[str, Any]) -> FeatureNode:
    children = [_to_node(c) for c in data.pop("children")]
    description = "\n".join(data.pop("description_lines")) or None
    return FeatureNode(**data, description=description, children=children or None)


__all__ = [
    "rice_tag",
    "feature_tree_content_markdown",
    "feature_tree_to_markdown",
    "priorities_to_markdown",
    "parse_feature_tree_markdown",
]
