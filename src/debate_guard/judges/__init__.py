from .base import Classification, ClassificationThresholds, FinalVerdict, RecommendedAction
from .score_judge import classify_score, final_score, map_instant_verdict, reduce_verdict

__all__ = [
    "Classification",
    "ClassificationThresholds",
    "FinalVerdict",
    "RecommendedAction",
    "classify_score",
    "final_score",
    "map_instant_verdict",
    "reduce_verdict",
]
