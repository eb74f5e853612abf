"""Convergence between the two personas' confidences.

The prosecutor reports how likely the content is harmful; the defender how
likely it is legitimate. Comparing the prosecutor against ``100 - defender``
puts both on the harm axis. All functions here are pure.
"""
from __future__ import annotations

from debate_guard._defaults import DEFAULT_CONSENSUS_SCORE, DEFAULT_CONVERGENCE_THRESHOLD


def disagreement(prosecutor_confidence: int, defender_confidence: int) -> int:
    return abs(prosecutor_confidence - (100 - defender_confidence))


def convergence_score(prosecutor_confidence: int, defender_confidence: int) -> int:
    return 100 - disagreement(prosecutor_confidence, defender_confidence)


def has_converged(
    prosecutor_confidence: int,
    defender_confidence: int,
    threshold: int = DEFAULT_CONVERGENCE_THRESHOLD,
) -> bool:
    return disagreement(prosecutor_confidence, defender_confidence) <= threshold


def should_continue(score: int, productivity_threshold: int = DEFAULT_CONSENSUS_SCORE) -> bool:
    return score < productivity_threshold
