# pm_workspace_core/pm_workspace/services/scoring/registry.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from pm_workspace.services.scoring.interfaces import ScoringFramework, ScoringEngine
from pm_workspace.services.scoring.engines import RiceScoringEngine


@dataclass(frozen=True)
class FrameworkInfo:
    name: ScoringFramework
    label: str
    description: str
    required_fields: List[str]
    engine: ScoringEngine


SCORING_FRAMEWORKS: Dict[ScoringFramework, FrameworkInfo] = {
    ScoringFramework.RICE: FrameworkInfo(
        name=ScoringFramework.RICE,
        label="RICE",
        description="Reach * Impact * (Confidence / 100) / Effort",
        required_fields=["reach", "impact", "confidence", "effort"],
        engine=RiceScoringEngine(),
    ),
}


def get_engine(framework: ScoringFramework) -> ScoringEngine:
    info = SCORING_FRAMEWORKS.get(framework)
    if not info:
        raise ValueError(f"Unknown scoring framework: {framework}")
    return info.engine


__all__ = [
    "FrameworkInfo",
    "SCORING_FRAMEWORKS",
    "get_engine",
]
