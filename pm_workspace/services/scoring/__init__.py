from .interfaces import (
    ScoringFramework,
    ScoreInputs,
    ScoreResult,
    ScoringEngine,
)
from .registry import (
    FrameworkInfo,
    SCORING_FRAMEWORKS,
    get_engine,
)
from .feature_tree import (
    compute_rice_score,
    flatten_tree,
    best_child_score,
    leaf_features,
    rank_leaves,
    impact_label,
    confidence_label,
    add_child_at_path,
    remove_node_at_path,
    update_node_at_path,
)

__all__ = [
    "ScoringFramework",
    "ScoreInputs",
    "ScoreResult",
    "ScoringEngine",
    "FrameworkInfo",
    "SCORING_FRAMEWORKS",
    "get_engine",
    "compute_rice_score",
    "flatten_tree",
    "best_child_score",
    "leaf_features",
    "rank_leaves",
    "impact_label",
    "confidence_label",
    "add_child_at_path",
    "remove_node_at_path",
    "update_node_at_path",
]
