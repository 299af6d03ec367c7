# pm_workspace_core/pm_workspace/services/scoring/engines/__init__.py

from .rice import RiceScoringEngine

__all__ = ["RiceScoringEngine"]
