from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum

from debate_guard.exceptions import ConfigurationError
from debate_guard.utils import json_serializable


class Classification(str, Enum):
    LEGITIMATE = "legitimate"
    UNCERTAIN = "uncertain"
    SUSPICIOUS = "suspicious"
    SCAM = "scam"


class RecommendedAction(str, Enum):
    NO_ACTION = "no_action"
    FLAG = "flag"
    QUARANTINE = "quarantine"
    BOOST_ALTERNATIVE = "boost_alternative"


@dataclass(frozen=True, slots=True)
class ClassificationThresholds:
    """Minimum final score for each bucket, evaluated high to low."""

    scam: int = 80
    suspicious: int = 60
    uncertain: int = 40

    def __post_init__(self) -> None:
        if not 0 <= self.uncertain <= self.suspicious <= self.scam <= 100:
            raise ConfigurationError(
                "thresholds must satisfy 0 <= uncertain <= suspicious <= scam <= 100, "
                f"got {self.uncertain}/{self.suspicious}/{self.scam}"
            )


@dataclass(frozen=True, slots=True)
class FinalVerdict:
    classification: Classification
    confidence: int
    reasoning: str
    recommended_action: RecommendedAction
    source: str = "debate"

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=json_serializable, ensure_ascii=True)
