# pm_workspace_core/pm_workspace/services/scoring/utils.py

from __future__ import annotations

from typing import Optional, Tuple


def clamp_min(value: float, min_value: float) -> Tuple[float, Optional[str]]:
    """Raise value to min_value if below it.

    Returns (result, warning); warning is set only when clamping happened.
    """
    if value < min_value:
        return min_value, f"value {value} clamped to {min_value}"
    return value, None


def all_present(*values: Optional[float]) -> bool:
    """True when none of the values is None."""
    return all(v is not None for v in values)


__all__ = ["clamp_min", "all_present"]
