# pm_workspace_core/pm_workspace/services/scoring/engines/rice.py

from __future__ import annotations

from pm_workspace.services.scoring.interfaces import ScoringFramework, ScoreInputs, ScoreResult
from pm_workspace.services.scoring.utils import all_present, clamp_min

# Floor applied to positive efforts before dividing
MIN_EFFORT = 0.5


class RiceScoringEngine:
    """RICE scoring engine.

    RICE formula: Reach * Impact * (Confidence / 100) / Effort
    - Any input missing -> unscored (overall_score None)
    - Effort exactly 0 -> unscored (0 means "not estimated yet")
    - Effort in (0, 0.5) -> clamped to 0.5
    """

    framework = ScoringFramework.RICE

    def compute(self, inputs: ScoreInputs) -> ScoreResult:
        reach, impact, confidence, effort = inputs.reach, inputs.impact, inputs.confidence, inputs.effort
        components = {
            "reach": reach,
            "impact": impact,
            "confidence": confidence,
            "effort": effort,
        }

        if not all_present(reach, impact, confidence, effort):
            return ScoreResult(components=components)
        if effort == 0:
            return ScoreResult(components=components, warnings=["RICE: effort is 0; treated as not estimated"])

        warnings = []
        used_effort, warn = clamp_min(effort, MIN_EFFORT)
        if warn:
            warnings.append(f"RICE: effort {warn}")

        value = reach * impact * (confidence / 100)
        overall = value / used_effort

        components["effort_used"] = used_effort
        components["value_raw"] = value
        return ScoreResult(
            value_score=value,
            effort_score=used_effort,
            overall_score=overall,
            components=components,
            warnings=warnings,
        )


__all__ = ["RiceScoringEngine", "MIN_EFFORT"]
