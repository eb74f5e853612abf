from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

from debate_guard._defaults import DEFAULT_CONVERGENCE_THRESHOLD, DEFAULT_MAX_ROUNDS
from debate_guard.content.base import ContentItem
from debate_guard.exceptions import ConfigurationError, InvalidContentError
from debate_guard.investigation.base import InvestigationResult
from debate_guard.investigation.investigator import Investigator
from debate_guard.judges.base import ClassificationThresholds
from debate_guard.judges.score_judge import reduce_verdict
from debate_guard.llm.client import CompletionService
from debate_guard.personas.base import Persona
from debate_guard.personas.registry import PersonaRegistry

from .base import DebateResult, DebateRound, DebateState
from .convergence import convergence_score, has_converged, should_continue
from .turns import defender_turn, extract_confidence, is_degraded, prosecutor_turn

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DebateConfig:
    max_rounds: int = DEFAULT_MAX_ROUNDS
    convergence_threshold: int = DEFAULT_CONVERGENCE_THRESHOLD
    # Both default to 100 - convergence_threshold.
    consensus_score: int | None = None
    productivity_threshold: int | None = None
    thresholds: ClassificationThresholds = field(default_factory=ClassificationThresholds)

    def __post_init__(self) -> None:
        if self.max_rounds < 1:
            raise ConfigurationError(f"max_rounds must be at least 1, got {self.max_rounds}")
        if not 0 <= self.convergence_threshold <= 100:
            raise ConfigurationError(
                f"convergence_threshold must be within 0-100, got {self.convergence_threshold}"
            )
        if self.consensus_score is None:
            self.consensus_score = 100 - self.convergence_threshold
        if self.productivity_threshold is None:
            self.productivity_threshold = 100 - self.convergence_threshold


class DebateOrchestrator:
    """Runs one prosecutor/defender debate over a piece of content.

    The flow is PLANNING -> ROUND(1..n) -> REDUCE -> DONE. Investigation runs
    once up front. Each round is a prosecutor turn followed by a defender
    turn that sees the prosecutor's fresh argument; the next prosecutor turn
    sees the defender's latest argument. The loop stops on the first round
    whose two confidences converge, or after ``max_rounds``. A round where
    either turn fell back to the neutral stand-in, or replied without a
    confidence line, never counts as converged.

    Upstream failures never abort a debate: the investigator and the turn
    functions substitute degraded values, so ``run_debate`` always returns a
    verdict.
    """

    def __init__(
        self,
        completion_service: CompletionService,
        investigator: Investigator,
        config: DebateConfig | None = None,
        prosecutor: Persona | None = None,
        defender: Persona | None = None,
        on_round: Callable[[DebateRound], None] | None = None,
    ) -> None:
        self.completion_service = completion_service
        self.investigator = investigator
        self.config = config or DebateConfig()
        self.prosecutor = prosecutor or PersonaRegistry.prosecutor()
        self.defender = defender or PersonaRegistry.defender()
        self.on_round = on_round

    async def run_debate(self, content: ContentItem) -> DebateResult:
        if content is None:
            raise InvalidContentError("run_debate requires a content item")

        start = time.perf_counter()
        state = DebateState.PLANNING
        logger.info("Debate %s: %s", content.id, state.value)
        investigation = await self.investigator.investigate(content)
        if investigation.user_profile is not None:
            logger.info(
                "Debate %s: profile @%s legitimacy %d/100",
                content.id,
                investigation.user_profile.username,
                investigation.legitimacy_score,
            )

        rounds: list[DebateRound] = []
        defender_argument = ""
        state = DebateState.ROUND
        for round_number in range(1, self.config.max_rounds + 1):
            logger.debug("Debate %s: %s %d/%d", content.id, state.value, round_number, self.config.max_rounds)
            current = await self._run_round(content, investigation, defender_argument, round_number)
            rounds.append(current)
            if self.on_round:
                self.on_round(current)

            logger.info(
                "Debate %s round %d: prosecutor=%d defender=%d convergence=%d",
                content.id,
                round_number,
                current.prosecutor_confidence,
                current.defender_confidence,
                current.convergence_score,
            )

            defender_argument = current.defender_argument

            if current.degraded:
                logger.warning("Debate %s round %d degraded; not treated as consensus", content.id, round_number)
                continue
            if has_converged(
                current.prosecutor_confidence,
                current.defender_confidence,
                self.config.convergence_threshold,
            ):
                logger.info("Debate %s: consensus reached in round %d", content.id, round_number)
                break
            if round_number < self.config.max_rounds and not should_continue(
                current.convergence_score, self.config.productivity_threshold,
            ):
                logger.info("Debate %s: further rounds not productive, stopping", content.id)
                break

        state = DebateState.REDUCE
        logger.debug("Debate %s: %s", content.id, state.value)
        verdict = reduce_verdict(investigation, rounds, self.config.thresholds)

        state = DebateState.DONE
        logger.info(
            "Debate %s: %s -> %s (%d/100, %s)",
            content.id,
            state.value,
            verdict.classification.value,
            verdict.confidence,
            verdict.recommended_action.value,
        )
        return DebateResult(
            rounds=tuple(rounds),
            investigation=investigation,
            consensus_reached=_consensus(rounds[-1], self.config.consensus_score),
            total_rounds=len(rounds),
            final_verdict=verdict,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )

    async def _run_round(
        self,
        content: ContentItem,
        investigation: InvestigationResult,
        defender_argument: str,
        round_number: int,
    ) -> DebateRound:
        prosecutor_argument = await prosecutor_turn(
            self.completion_service,
            content,
            investigation,
            defender_argument,
            round_number,
            persona=self.prosecutor,
        )
        prosecutor_confidence = extract_confidence(prosecutor_argument)

        defender_reply = await defender_turn(
            self.completion_service,
            content,
            investigation,
            prosecutor_argument,
            round_number,
            persona=self.defender,
        )
        defender_confidence = extract_confidence(defender_reply)

        return DebateRound(
            round=round_number,
            prosecutor_argument=prosecutor_argument,
            prosecutor_confidence=prosecutor_confidence,
            defender_argument=defender_reply,
            defender_confidence=defender_confidence,
            convergence_score=convergence_score(prosecutor_confidence, defender_confidence),
            degraded=is_degraded(prosecutor_argument) or is_degraded(defender_reply),
        )


def _consensus(last: DebateRound, consensus_score: int) -> bool:
    return not last.degraded and last.convergence_score >= consensus_score
