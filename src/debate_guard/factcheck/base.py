from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any

from debate_guard.utils import coerce_confidence, json_serializable


class ClaimType(str, Enum):
    STATISTIC = "statistic"
    NEWS = "news"
    SCIENTIFIC = "scientific"
    POLITICAL = "political"
    NONE = "none"


class FactCheckVerdict(str, Enum):
    TRUE = "true"
    MOSTLY_TRUE = "mostly_true"
    MIXED = "mixed"
    MOSTLY_FALSE = "mostly_false"
    FALSE = "false"
    UNVERIFIABLE = "unverifiable"

    @property
    def is_misinformation(self) -> bool:
        return self in (FactCheckVerdict.FALSE, FactCheckVerdict.MOSTLY_FALSE)


def _strings(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item).strip() for item in value if str(item).strip())


def _enum_value(enum_cls, value: Any, default):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class ClaimDetection:
    has_claim: bool
    claim_type: ClaimType = ClaimType.NONE
    claims: tuple[str, ...] = ()
    search_queries: tuple[str, ...] = ()

    @classmethod
    def none(cls) -> "ClaimDetection":
        return cls(has_claim=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ClaimDetection":
        claims = _strings(payload.get("claims"))
        if not payload.get("hasClaim") or not claims:
            return cls.none()
        return cls(
            has_claim=True,
            claim_type=_enum_value(ClaimType, payload.get("claimType"), ClaimType.NONE),
            claims=claims,
            search_queries=_strings(payload.get("searchQueries")),
        )


@dataclass(frozen=True, slots=True)
class ClaimAssessment:
    verdict: FactCheckVerdict
    confidence: int
    explanation: str = ""
    sources: tuple[str, ...] = ()
    context: str = ""
    community_note: str = ""

    @classmethod
    def unverifiable(cls, explanation: str) -> "ClaimAssessment":
        return cls(verdict=FactCheckVerdict.UNVERIFIABLE, confidence=0, explanation=explanation)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ClaimAssessment":
        return cls(
            verdict=_enum_value(FactCheckVerdict, payload.get("verdict"), FactCheckVerdict.UNVERIFIABLE),
            confidence=coerce_confidence(payload.get("confidence"), default=0),
            explanation=str(payload.get("explanation") or ""),
            sources=_strings(payload.get("sources")),
            context=str(payload.get("context") or ""),
            community_note=str(payload.get("communityNote") or ""),
        )

    def softened(self, username: str) -> "ClaimAssessment":
        """Conservative rewrite used when a credible source is contradicted without strong evidence."""
        return replace(
            self,
            verdict=FactCheckVerdict.UNVERIFIABLE,
            confidence=50,
            explanation=f"Post from verified source @{username}. Unable to verify claim with high confidence.",
            sources=(),
            context="Credible source - requires additional verification",
        )


@dataclass(frozen=True, slots=True)
class FactCheckResult:
    has_claim: bool
    claim_type: ClaimType = ClaimType.NONE
    claims: tuple[str, ...] = ()
    assessment: ClaimAssessment | None = None
    credible_source: bool = False

    @property
    def verdict(self) -> FactCheckVerdict | None:
        return self.assessment.verdict if self.assessment else None

    @property
    def is_misinformation(self) -> bool:
        return self.has_claim and self.verdict is not None and self.verdict.is_misinformation

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=json_serializable, ensure_ascii=True)
