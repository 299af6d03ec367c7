# pm_workspace_core/test_scripts/conftest.py
from __future__ import annotations

from datetime import date

import pytest

from pm_workspace.schemas.features import FeatureNode
from pm_workspace.schemas.roadmap import (
    ItemStatus,
    ItemType,
    RoadmapArtifact,
    RoadmapItem,
    RoadmapLane,
    TimeScale,
)


@pytest.fixture
def fixed_today() -> date:
    # a Monday
    return date(2026, 3, 2)


@pytest.fixture
def sample_roadmap() -> RoadmapArtifact:
    return RoadmapArtifact(
        id="rm-1",
        title="Q2 Launch",
        time_scale=TimeScale.MONTHLY,
        lanes=[
            RoadmapLane(id="lane-fe", name="Frontend", color="#3b82f6"),
            RoadmapLane(id="lane-be", name="Backend", color="#8b5cf6"),
        ],
        items=[
            RoadmapItem(
                id="it-1",
                title="Onboarding flow",
                description="New signup wizard",
                lane_id="lane-fe",
                start_date="2026-03-02",
                end_date="2026-03-15",
                status=ItemStatus.IN_PROGRESS,
            ),
            RoadmapItem(
                id="it-2",
                title="Billing page",
                lane_id="lane-fe",
                start_date="2026-03-10",
                end_date="2026-03-20",
            ),
            RoadmapItem(
                id="it-3",
                title="Payments API",
                lane_id="lane-be",
                start_date="2026-02-16",
                end_date="2026-02-27",
                status=ItemStatus.REVIEW,
            ),
            RoadmapItem(
                id="it-4",
                title="Public beta",
                lane_id="lane-be",
                start_date="2026-04-01",
                end_date="2026-04-01",
                type=ItemType.MILESTONE,
            ),
        ],
    )


@pytest.fixture
def sample_tree() -> list:
    return [
        FeatureNode(
            title="Checkout",
            children=[
                FeatureNode(title="One-page checkout", reach=5000, impact=2, confidence=80, effort=4),
                FeatureNode(title="Saved cards", reach=3000, impact=1, confidence=100, effort=1),
            ],
        ),
        FeatureNode(
            title="Search",
            description="Find anything fast",
            children=[
                FeatureNode(
                    title="Filters",
                    children=[
                        FeatureNode(title="Price filter", reach=2000, impact=0.5, confidence=50, effort=2),
                    ],
                ),
            ],
        ),
        FeatureNode(title="Dark mode"),
    ]
