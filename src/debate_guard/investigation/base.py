from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from debate_guard.profiles.base import EnrichedProfile, PostRecord


class InvestigationTool(str, Enum):
    FETCH_USER_PROFILE = "fetch_user_profile"
    FETCH_USER_POSTS = "fetch_user_posts"
    SEARCH_SIMILAR_BIOS = "search_similar_bios"
    CHECK_FOLLOWER_NETWORK = "check_follower_network"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass(frozen=True, slots=True)
class PlannedAction:
    tool: InvestigationTool
    reason: str
    priority: Priority = Priority.LOW


@dataclass(frozen=True, slots=True)
class InvestigationPlan:
    reasoning: str
    actions: tuple[PlannedAction, ...]

    @classmethod
    def fallback(cls, reasoning: str = "Error in planning - using fallback (fetch profile only)") -> "InvestigationPlan":
        return cls(
            reasoning=reasoning,
            actions=(
                PlannedAction(
                    tool=InvestigationTool.FETCH_USER_PROFILE,
                    reason="Essential baseline data",
                    priority=Priority.HIGH,
                ),
            ),
        )

    def sorted_by_priority(self) -> "InvestigationPlan":
        # sorted() is stable, so same-priority actions keep the model's order.
        ordered = tuple(sorted(self.actions, key=lambda action: action.priority.rank))
        return InvestigationPlan(reasoning=self.reasoning, actions=ordered)


@dataclass(frozen=True, slots=True)
class FollowerNetwork:
    followers_count: int
    following_count: int
    ratio: float
    pattern: str


@dataclass(frozen=True, slots=True)
class ContentSignals:
    has_wallet_addresses: bool = False
    has_suspicious_links: bool = False
    has_urgency_language: bool = False
    has_impersonation_signals: bool = False

    def flagged(self) -> list[str]:
        names = {
            "wallet addresses": self.has_wallet_addresses,
            "shortened links": self.has_suspicious_links,
            "urgency language": self.has_urgency_language,
            "impersonation wording": self.has_impersonation_signals,
        }
        return [name for name, hit in names.items() if hit]


@dataclass(frozen=True, slots=True)
class ProfileImageAnalysis:
    is_stock_photo: bool
    is_ai_generated: bool
    confidence: int
    explanation: str


@dataclass(slots=True)
class InvestigationResult:
    plan: InvestigationPlan
    user_profile: EnrichedProfile | None = None
    user_posts: list[PostRecord] | None = None
    follower_network: FollowerNetwork | None = None
    similar_accounts: list[Any] | None = None
    content_signals: ContentSignals = field(default_factory=ContentSignals)
    profile_image_analysis: ProfileImageAnalysis | None = None
    execution_log: list[str] = field(default_factory=list)

    @property
    def legitimacy_score(self) -> int | None:
        if self.user_profile is None:
            return None
        return self.user_profile.assessment.legitimacy_score
