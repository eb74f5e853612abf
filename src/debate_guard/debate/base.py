from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum

from debate_guard.investigation.base import InvestigationResult
from debate_guard.judges.base import FinalVerdict
from debate_guard.utils import json_serializable


class DebateState(str, Enum):
    PLANNING = "planning"
    ROUND = "round"
    REDUCE = "reduce"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class DebateRound:
    round: int
    prosecutor_argument: str
    prosecutor_confidence: int
    defender_argument: str
    defender_confidence: int
    convergence_score: int
    # Either turn fell back to the neutral stand-in or had no confidence line.
    degraded: bool = False


@dataclass(frozen=True, slots=True)
class DebateResult:
    rounds: tuple[DebateRound, ...]
    investigation: InvestigationResult
    consensus_reached: bool
    total_rounds: int
    final_verdict: FinalVerdict
    duration_ms: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=json_serializable, ensure_ascii=True)
