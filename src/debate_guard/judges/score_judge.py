from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from debate_guard._defaults import NEUTRAL_CONFIDENCE
from debate_guard.utils import coerce_confidence, excerpt, round_half_up

from .base import Classification, ClassificationThresholds, FinalVerdict, RecommendedAction

if TYPE_CHECKING:
    from debate_guard.debate.base import DebateRound
    from debate_guard.investigation.base import InvestigationResult

ARGUMENT_EXCERPT_CHARS = 200

_INSTANT_CLASSIFICATIONS = {
    "clean": Classification.LEGITIMATE,
    "scam": Classification.SCAM,
    "suspicious": Classification.SUSPICIOUS,
}
_INSTANT_ACTIONS = {
    "scam": RecommendedAction.QUARANTINE,
    "suspicious": RecommendedAction.FLAG,
}


def final_score(prosecutor_confidence: int, defender_confidence: int) -> int:
    """Average the prosecutor's harm estimate with the defender's implied one."""
    return round_half_up((prosecutor_confidence + (100 - defender_confidence)) / 2)


def classify_score(
    score: int,
    thresholds: ClassificationThresholds | None = None,
) -> tuple[Classification, RecommendedAction]:
    thresholds = thresholds or ClassificationThresholds()
    if score >= thresholds.scam:
        return Classification.SCAM, RecommendedAction.QUARANTINE
    if score >= thresholds.suspicious:
        return Classification.SUSPICIOUS, RecommendedAction.FLAG
    if score >= thresholds.uncertain:
        return Classification.UNCERTAIN, RecommendedAction.FLAG
    return Classification.LEGITIMATE, RecommendedAction.NO_ACTION


def reduce_verdict(
    investigation: InvestigationResult | None,
    rounds: Sequence[DebateRound],
    thresholds: ClassificationThresholds | None = None,
) -> FinalVerdict:
    """Collapse a finished debate into a verdict using the last round only."""
    if not rounds:
        return FinalVerdict(
            classification=Classification.UNCERTAIN,
            confidence=NEUTRAL_CONFIDENCE,
            reasoning="No debate rounds were recorded; defaulting to an uncertain verdict.",
            recommended_action=RecommendedAction.FLAG,
        )

    last = rounds[-1]
    score = final_score(last.prosecutor_confidence, last.defender_confidence)
    classification, action = classify_score(score, thresholds)

    legitimacy = investigation.legitimacy_score if investigation is not None else None
    reasoning = (
        f"After {len(rounds)} rounds of debate:\n"
        f"- Prosecutor final confidence: {last.prosecutor_confidence}/100\n"
        f"- Defender final confidence: {last.defender_confidence}/100\n"
        f"- Investigation legitimacy score: {legitimacy if legitimacy is not None else 'N/A'}\n\n"
        f"Key prosecutor arguments: {excerpt(last.prosecutor_argument, ARGUMENT_EXCERPT_CHARS)}...\n\n"
        f"Key defender arguments: {excerpt(last.defender_argument, ARGUMENT_EXCERPT_CHARS)}...\n\n"
        f"Consensus score: {last.convergence_score}/100"
    )

    return FinalVerdict(
        classification=classification,
        confidence=score,
        reasoning=reasoning,
        recommended_action=action,
    )


def map_instant_verdict(payload: dict[str, Any]) -> FinalVerdict:
    """Map a ``{verdict, confidence, reason}`` payload from the fast path."""
    raw = str(payload.get("verdict", "")).strip().lower()
    return FinalVerdict(
        classification=_INSTANT_CLASSIFICATIONS.get(raw, Classification.UNCERTAIN),
        confidence=coerce_confidence(payload.get("confidence"), default=NEUTRAL_CONFIDENCE),
        reasoning=str(payload.get("reason") or "No reason given."),
        recommended_action=_INSTANT_ACTIONS.get(raw, RecommendedAction.NO_ACTION),
        source="instant",
    )
