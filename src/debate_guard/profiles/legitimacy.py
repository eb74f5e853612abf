"""Account legitimacy scoring.

The score starts neutral at 50 and moves with each positive or negative
signal found in the profile, then is clamped to 0-100. It feeds persona
prompts and verdict reasoning only; it never enters the convergence or
classification arithmetic.
"""
from __future__ import annotations

import re
from datetime import datetime, timezone

from .base import (
    EnrichedProfile,
    LegitimacyAssessment,
    ProfileRecord,
    RiskLevel,
    ScamRiskFactors,
)

_GENERIC_USERNAME_RE = re.compile(r"^[a-zA-Z]+[0-9]{4,}$|^[a-zA-Z]+_[a-zA-Z]+[0-9]+$")


def enrich_profile(record: ProfileRecord, now: datetime | None = None) -> EnrichedProfile:
    now = now or datetime.now(timezone.utc)
    created = record.created_at or now
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)

    age_days = max(0, (now - created).days)
    age_years = age_days // 365

    metrics = record.public_metrics
    followers = metrics.followers_count if metrics else 0
    following = metrics.following_count if metrics else 0
    tweets = metrics.tweet_count if metrics else 0
    listed = metrics.listed_count if metrics else 0

    follower_ratio = followers / following if following > 0 else float(followers)
    posts_per_day = tweets / age_days if age_days > 0 else 0.0

    bio_length = len(record.description or "")
    default_image = "default_profile" in (record.profile_image_url or "")

    risks = ScamRiskFactors(
        suspicious_follow_pattern=following > 100 and follower_ratio < 0.1,
        new_account_high_following=age_days < 90 and following > 500,
        no_activity_high_followers=tweets < 10 and followers > 1000,
        generic_username=bool(_GENERIC_USERNAME_RE.match(record.username or "")),
        empty_profile=not record.description and not record.profile_image_url and tweets == 0,
        rapid_following=age_days > 0 and following / age_days > 100,
    )

    verified = bool(record.verified)
    positive: list[str] = []
    negative: list[str] = []
    neutral: list[str] = []
    score = 50

    if verified:
        score += 35
        positive.append(f"Verified ({record.verified_type or 'yes'})")
    if record.verified_type == "government":
        score += 5
        positive.append("Government verified")

    if age_years > 10:
        score += 20
        positive.append(f"Very old account ({age_years} years)")
    elif age_years > 5:
        score += 15
        positive.append(f"Established account ({age_years} years)")
    elif age_years > 2:
        score += 10
        positive.append(f"Mature account ({age_years} years)")

    if followers > 1_000_000:
        score += 15
        positive.append("Very high follower count (1M+)")
    elif followers > 100_000:
        score += 12
        positive.append("High follower count (100K+)")
    elif followers > 10_000:
        score += 8
        positive.append("Significant follower count (10K+)")

    if follower_ratio > 10 and followers > 1000:
        score += 10
        positive.append("Healthy follower ratio")

    if listed > 1000:
        score += 10
        positive.append("Listed on many accounts")
    elif listed > 100:
        score += 5
        positive.append("Listed on multiple accounts")

    if tweets > 10_000:
        score += 10
        positive.append("Very active account (10K+ posts)")
    elif tweets > 1000:
        score += 7
        positive.append("Active account (1K+ posts)")
    elif tweets > 100:
        score += 5
        positive.append("Some activity (100+ posts)")

    if posts_per_day > 1:
        score += 5
        positive.append("Regularly active (1+ post/day)")

    if bio_length > 100:
        score += 8
        positive.append("Detailed bio")
    elif bio_length > 50:
        score += 5
        positive.append("Complete bio")

    if record.url:
        score += 5
        positive.append("Has website")
    if record.location:
        score += 3
        positive.append("Has location")
    if not default_image:
        score += 5
        positive.append("Custom profile image")

    if risks.empty_profile:
        score -= 25
        negative.append("Empty profile (no bio, no image, no posts)")
    if risks.suspicious_follow_pattern:
        score -= 20
        negative.append("Suspicious follow pattern (following many, few followers)")
    if risks.new_account_high_following:
        score -= 15
        negative.append("New account following many (potential bot)")
    if risks.rapid_following:
        score -= 15
        negative.append("Rapid following pattern (100+ per day)")
    if risks.no_activity_high_followers:
        score -= 12
        negative.append("High followers but no activity")
    if risks.generic_username:
        score -= 10
        negative.append("Generic username pattern")

    if age_days < 30:
        score -= 10
        negative.append("Very new account (<30 days)")
    elif age_days < 90:
        score -= 5
        negative.append("New account (<3 months)")

    if not verified and followers < 100:
        score -= 8
        negative.append("Very low followers")
    if tweets == 0:
        score -= 10
        negative.append("No posts")
    if default_image:
        score -= 8
        negative.append("Default profile image")
    if bio_length == 0:
        score -= 5
        negative.append("No bio")

    if follower_ratio < 0.5 and followers < 1000:
        neutral.append("More following than followers (common for new users)")
    if posts_per_day < 0.1:
        neutral.append("Low activity account")

    # Large unverified accounts are usually an API verification gap, not fakes.
    api_limitation = None
    if not verified and followers > 100_000 and age_years > 3 and tweets > 100:
        score += 20
        api_limitation = "HIGH_FOLLOWER_UNVERIFIED_LIKELY_API_LIMITATION"
        positive.append("API may have incomplete verification data")

    score = max(0, min(100, score))

    return EnrichedProfile(
        record=record,
        assessment=LegitimacyAssessment(
            account_age_days=age_days,
            account_age_years=age_years,
            follower_ratio=follower_ratio,
            average_posts_per_day=posts_per_day,
            scam_risk_factors=risks,
            legitimacy_score=score,
            risk_level=risk_level_for(score),
            positive_factors=positive,
            negative_factors=negative,
            neutral_factors=neutral,
            data_completeness=data_completeness(record),
            api_limitation=api_limitation,
        ),
    )


def risk_level_for(score: int) -> RiskLevel:
    if score >= 80:
        return RiskLevel.LOW
    if score >= 50:
        return RiskLevel.MEDIUM
    if score >= 30:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def data_completeness(record: ProfileRecord) -> int:
    """Percentage of the ten profile fields the API actually returned."""
    metrics = record.public_metrics
    present = [
        record.created_at is not None,
        bool(record.description),
        bool(record.profile_image_url),
        record.verified is not None,
        metrics is not None,
        metrics is not None,
        metrics is not None,
        metrics is not None,
        bool(record.url),
        bool(record.location),
    ]
    return round(sum(present) / len(present) * 100)
