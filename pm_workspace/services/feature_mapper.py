# pm_workspace_core/pm_workspace/services/feature_mapper.py
from __future__ import annotations

from typing import List, Optional, Sequence

from pm_workspace.schemas.features import FeatureNode, FeatureTreeArtifact
from pm_workspace.schemas.records import FeatureRecord, FlatFeatureInput
from pm_workspace.services.markdown.feature_tree import feature_tree_content_markdown

SYNTHETIC_ROOT_TITLE = "Feature Tree"


def _record_to_node(record: FeatureRecord) -> FeatureNode:
    children = [_record_to_node(c) for c in record.children or []]
    return FeatureNode(
        title=record.title,
        description=record.description or None,
        reach=record.rice_reach,
        impact=record.rice_impact,
        confidence=record.rice_confidence,
        effort=record.rice_effort,
        children=children or None,
        db_id=record.id,
    )


def db_feature_tree_to_artifact(root_records: Sequence[FeatureRecord]) -> Optional[FeatureTreeArtifact]:
    """Root-level feature records (children nested) -> artifact; None when there are none.

    A single root lends its title to the tree, several roots get a synthetic title.
    """
    if not root_records:
        return None

    root_title = root_records[0].title if len(root_records) == 1 else SYNTHETIC_ROOT_TITLE
    children = [_record_to_node(r) for r in sorted(root_records, key=lambda r: r.order)]
    return FeatureTreeArtifact(
        root_feature=root_title,
        children=children,
        content=feature_tree_content_markdown(root_title, children),
    )


def flatten_feature_nodes(
    nodes: Sequence[FeatureNode],
    parent_db_id: Optional[str] = None,
) -> List[FlatFeatureInput]:
    """Pre-order rows for tree sync; parent_db_id and order rebuild the hierarchy."""
    result: List[FlatFeatureInput] = []
    for i, node in enumerate(nodes):
        result.append(
            FlatFeatureInput(
                db_id=node.db_id,
                title=node.title,
                description=node.description,
                reach=node.reach,
                impact=node.impact,
                confidence=node.confidence,
                effort=node.effort,
                parent_db_id=parent_db_id,
                order=i,
            )
        )
        if node.children:
            result.extend(flatten_feature_nodes(node.children, node.db_id))
    return result


__all__ = ["db_feature_tree_to_artifact", "flatten_feature_nodes"]
