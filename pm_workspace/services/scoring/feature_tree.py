# pm_workspace_core/pm_workspace/services/scoring/feature_tree.py
"""
RICE scoring over the recursive feature tree.

- compute_rice_score: score of one node (None = unscored)
- flatten_tree: deterministic pre-order FlatFeature list
- best_child_score: most urgent descendant leaf score of a group node
- rank_leaves: leaves ordered for the priority matrix
- add/remove/update_node_at_path: pure structural edits addressed by path

Paths are sibling-index sequences from the root's children, e.g. [0, 2] is
the third child of the first top-level feature.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from pm_workspace.schemas.features import FeatureNode, FlatFeature
from pm_workspace.services.scoring.interfaces import ScoreInputs, ScoringFramework
from pm_workspace.services.scoring.registry import get_engine

IMPACT_OPTIONS = [
    (0.25, "Minimal"),
    (0.5, "Low"),
    (1.0, "Medium"),
    (2.0, "High"),
    (3.0, "Massive"),
]

CONFIDENCE_OPTIONS = [
    (50.0, "Low"),
    (80.0, "Medium"),
    (100.0, "High"),
]


def compute_rice_score(node: FeatureNode) -> Optional[float]:
    inputs = ScoreInputs(
        reach=node.reach,
        impact=node.impact,
        confidence=node.confidence,
        effort=node.effort,
    )
    return get_engine(ScoringFramework.RICE).compute(inputs).overall_score


def flatten_tree(
    children: Sequence[FeatureNode],
    parent_path: Sequence[int] = (),
    parent_titles: Sequence[str] = (),
) -> List[FlatFeature]:
    result: List[FlatFeature] = []
    for i, node in enumerate(children):
        path = [*parent_path, i]
        result.append(
            FlatFeature(
                node=node,
                path=path,
                depth=len(path) - 1,
                parent_titles=list(parent_titles),
                rice_score=compute_rice_score(node),
                is_leaf=node.is_leaf,
            )
        )
        if node.children:
            result.extend(flatten_tree(node.children, path, [*parent_titles, node.title]))
    return result


def best_child_score(node: FeatureNode) -> Optional[float]:
    if node.is_leaf:
        return compute_rice_score(node)
    scores = [s for s in (best_child_score(c) for c in node.children or []) if s is not None]
    return max(scores) if scores else None


def leaf_features(children: Sequence[FeatureNode]) -> List[FlatFeature]:
    return [f for f in flatten_tree(children) if f.is_leaf]


def rank_leaves(children: Sequence[FeatureNode]) -> List[FlatFeature]:
    """Leaves sorted by RICE score, highest first.

    When at least one leaf is scored only scored leaves are returned;
    otherwise every leaf is returned in tree order.
    """
    leaves = leaf_features(children)
    scored = [f for f in leaves if f.rice_score is not None]
    rows = scored if scored else leaves
    # sorted() is stable, so equal scores keep pre-order
    return sorted(rows, key=lambda f: -(f.rice_score if f.rice_score is not None else -1))


def impact_label(value: Optional[float]) -> str:
    if value is None:
        return "—"
    for opt_value, label in IMPACT_OPTIONS:
        if opt_value == value:
            return label
    return format_number(value)


def confidence_label(value: Optional[float]) -> str:
    if value is None:
        return "—"
    for opt_value, label in CONFIDENCE_OPTIONS:
        if opt_value == value:
            return f"{label} ({format_number(value)}%)"
    return f"{format_number(value)}%"


def format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


# ---------------------------------------------------------------------------
# Structural edits
# ---------------------------------------------------------------------------

def add_child_at_path(
    children: Sequence[FeatureNode],
    path: Sequence[int],
    new_node: FeatureNode,
) -> List[FeatureNode]:
    """Append new_node under the node at path; [] appends a top-level feature."""
    if not path:
        return [*children, new_node]
    i, rest = path[0], path[1:]
    return [
        c.model_copy(update={"children": add_child_at_path(c.children or [], rest, new_node)})
        if idx == i
        else c
        for idx, c in enumerate(children)
    ]


def remove_node_at_path(children: Sequence[FeatureNode], path: Sequence[int]) -> List[FeatureNode]:
    if not path:
        return list(children)
    i, rest = path[0], path[1:]
    if not rest:
        return [c for idx, c in enumerate(children) if idx != i]
    return [
        c.model_copy(update={"children": remove_node_at_path(c.children or [], rest)})
        if idx == i
        else c
        for idx, c in enumerate(children)
    ]


def update_node_at_path(
    children: Sequence[FeatureNode],
    path: Sequence[int],
    update: Dict[str, Any],
) -> List[FeatureNode]:
    """Merge update into the node at path. Values are re-validated."""
    if not path:
        return list(children)
    i, rest = path[0], path[1:]
    out: List[FeatureNode] = []
    for idx, c in enumerate(children):
        if idx != i:
            out.append(c)
        elif not rest:
            out.append(FeatureNode.model_validate({**c.model_dump(), **update}))
        else:
            out.append(c.model_copy(update={"children": update_node_at_path(c.children or [], rest, update)}))
    return out


__all__ = [
    "IMPACT_OPTIONS",
    "CONFIDENCE_OPTIONS",
    "compute_rice_score",
    "flatten_tree",
    "best_child_score",
    "leaf_features",
    "rank_leaves",
    "impact_label",
    "confidence_label",
    "format_number",
    "add_child_at_path",
    "remove_node_at_path",
    "update_node_at_path",
]
