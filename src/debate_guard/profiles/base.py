from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Protocol


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass(slots=True)
class PublicMetrics:
    followers_count: int = 0
    following_count: int = 0
    tweet_count: int = 0
    listed_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PublicMetrics":
        data = data or {}
        return cls(
            followers_count=int(data.get("followers_count") or 0),
            following_count=int(data.get("following_count") or 0),
            tweet_count=int(data.get("tweet_count") or 0),
            listed_count=int(data.get("listed_count") or 0),
        )


@dataclass(slots=True)
class ProfileRecord:
    """Raw account data as returned by the platform API."""

    id: str
    username: str
    name: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    verified: bool | None = None
    verified_type: str | None = None
    profile_image_url: str | None = None
    url: str | None = None
    location: str | None = None
    public_metrics: PublicMetrics | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ProfileRecord":
        created_at = None
        if data.get("created_at"):
            created_at = datetime.fromisoformat(str(data["created_at"]).replace("Z", "+00:00"))
        metrics = data.get("public_metrics")
        return cls(
            id=str(data["id"]),
            username=str(data.get("username", "")),
            name=data.get("name"),
            description=data.get("description"),
            created_at=created_at,
            verified=data.get("verified"),
            verified_type=data.get("verified_type"),
            profile_image_url=data.get("profile_image_url"),
            url=data.get("url"),
            location=data.get("location"),
            public_metrics=PublicMetrics.from_dict(metrics) if metrics is not None else None,
        )


@dataclass(slots=True)
class PostRecord:
    id: str
    text: str
    created_at: datetime | None = None
    public_metrics: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PostRecord":
        created_at = None
        if data.get("created_at"):
            created_at = datetime.fromisoformat(str(data["created_at"]).replace("Z", "+00:00"))
        return cls(
            id=str(data["id"]),
            text=str(data.get("text", "")),
            created_at=created_at,
            public_metrics=dict(data.get("public_metrics") or {}),
        )


@dataclass(slots=True)
class ScamRiskFactors:
    suspicious_follow_pattern: bool = False
    new_account_high_following: bool = False
    no_activity_high_followers: bool = False
    generic_username: bool = False
    empty_profile: bool = False
    rapid_following: bool = False

    def flagged(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name)]


@dataclass(slots=True)
class LegitimacyAssessment:
    account_age_days: int
    account_age_years: int
    follower_ratio: float
    average_posts_per_day: float
    scam_risk_factors: ScamRiskFactors
    legitimacy_score: int
    risk_level: RiskLevel
    positive_factors: list[str] = field(default_factory=list)
    negative_factors: list[str] = field(default_factory=list)
    neutral_factors: list[str] = field(default_factory=list)
    data_completeness: int = 0
    api_limitation: str | None = None


@dataclass(slots=True)
class EnrichedProfile:
    """A :class:`ProfileRecord` together with its legitimacy assessment."""

    record: ProfileRecord
    assessment: LegitimacyAssessment

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def username(self) -> str:
        return self.record.username

    @property
    def metrics(self) -> PublicMetrics:
        return self.record.public_metrics or PublicMetrics()


class ProfileDataService(Protocol):
    async def get_profile(self, username: str) -> EnrichedProfile | None: ...

    async def get_recent_posts(self, user_id: str, limit: int = 20) -> list[PostRecord]: ...
