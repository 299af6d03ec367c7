# pm_workspace_core/pm_workspace/schemas/features.py

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class FeatureNode(BaseModel):
    """A node in the recursive feature tree.

    RICE inputs are optional and only bounds-checked here:
    - reach: >= 0 (users / events per period)
    - impact: >= 0, conventionally one of 0.25, 0.5, 1, 2, 3
    - confidence: percent in [0, 100], conventionally 50, 80 or 100
    - effort: >= 0 person-weeks; a stored 0 means "not estimated"
    A node with no children (None or empty list) is a leaf.
    """
    title: str
    description: Optional[str] = None
    reach: Optional[float] = Field(default=None, ge=0)
    impact: Optional[float] = Field(default=None, ge=0)
    confidence: Optional[float] = Field(default=None, ge=0, le=100)
    effort: Optional[float] = Field(default=None, ge=0)
    children: Optional[List["FeatureNode"]] = None

    # Persistence identifier, carried through edits so sync can upsert
    db_id: Optional[str] = None

    @property
    def is_leaf(self) -> bool:
        return not self.children


class FeatureTreeArtifact(BaseModel):
    root_feature: str
    children: List[FeatureNode] = Field(default_factory=list)
    content: Optional[str] = None  # markdown rendition, regenerated from children


class FlatFeature(BaseModel):
    """Derived pre-order view of one FeatureNode. Never persisted."""
    node: FeatureNode
    path: List[int]
    depth: int
    parent_titles: List[str] = Field(default_factory=list)
    rice_score: Optional[float] = None
    is_leaf: bool

    @property
    def breadcrumb(self) -> str:
        return " › ".join([*self.parent_titles, self.node.title])


FeatureNode.model_rebuild()


__all__ = ["FeatureNode", "FeatureTreeArtifact", "FlatFeature"]
