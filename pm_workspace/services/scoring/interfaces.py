# pm_workspace_core/pm_workspace/services/scoring/interfaces.py

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Protocol

from pydantic import BaseModel, Field


class ScoringFramework(str, Enum):
    """Supported scoring framework identifiers."""
    RICE = "RICE"


class ScoreInputs(BaseModel):
    """Numeric inputs for scoring engines.

    RICE conventions used by the feature tree:
    - reach: users / events per period (>= 0)
    - impact: multiplier, one of 0.25, 0.5, 1, 2, 3
    - confidence: percent (50, 80, 100)
    - effort: person-weeks; 0 means "not estimated"
    Any input left as None makes the result unscored.
    """
    reach: Optional[float] = None
    impact: Optional[float] = None
    confidence: Optional[float] = None
    effort: Optional[float] = None

    # Generic extension slot (future frameworks)
    extra: Dict[str, Any] = Field(default_factory=dict)


class ScoreResult(BaseModel):
    """Result returned by a scoring engine.

    value_score: expresses benefit / desirability (framework-specific)
    effort_score: expresses cost / size actually used in the division
    overall_score: the primary prioritization metric; None means "unscored",
        which consumers must keep distinct from 0
    components: raw components used to derive scores (for audit / transparency)
    warnings: non-fatal computation notes (e.g., effort clamped)
    """
    value_score: Optional[float] = None
    effort_score: Optional[float] = None
    overall_score: Optional[float] = None

    components: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)

    @property
    def is_scored(self) -> bool:
        return self.overall_score is not None


class ScoringEngine(Protocol):
    """Protocol that all scoring engines must satisfy."""

    framework: ScoringFramework  # identifier of the engine

    def compute(self, inputs: ScoreInputs) -> ScoreResult:  # pragma: no cover - interface only
        ...



__all__ = [
    "ScoringFramework",
    "ScoreInputs",
    "ScoreResult",
    "ScoringEngine",
]
