from .base import DebateResult, DebateRound, DebateState
from .convergence import convergence_score, disagreement, has_converged, should_continue
from .engine import DebateConfig, DebateOrchestrator
from .turns import defender_turn, extract_confidence, is_degraded, parse_confidence, prosecutor_turn

__all__ = [
    "DebateConfig",
    "DebateOrchestrator",
    "DebateResult",
    "DebateRound",
    "DebateState",
    "convergence_score",
    "defender_turn",
    "disagreement",
    "extract_confidence",
    "has_converged",
    "is_degraded",
    "parse_confidence",
    "prosecutor_turn",
    "should_continue",
]
