# pm_workspace_core/pm_workspace/utils/ids.py

"""Client-side identifiers for lanes and items.

Format: rm-<epoch ms>-<sequence>. The persistence layer reconciles these
against server-assigned ids (upsert by client id), so they only need to be
unique within a process.
"""

from __future__ import annotations

import itertools

from pm_workspace.utils.dates import now_ms

_counter = itertools.count(1)


def generate_id(prefix: str = "rm") -> str:
    """Generate a new client id, e.g. rm-1767225600000-7."""
    return f"{prefix}-{now_ms()}-{next(_counter)}"


__all__ = ["generate_id"]
