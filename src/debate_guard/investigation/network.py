from __future__ import annotations

from debate_guard.profiles.base import EnrichedProfile

from .base import FollowerNetwork

AGGRESSIVE_FOLLOWER = "aggressive_follower (bot pattern)"
INFLUENCER = "influencer"
FOLLOWER_CHASER = "follower_chaser (potential spam)"
NEW_ACCOUNT = "new_account"
NORMAL = "normal"


def follower_ratio(followers: int, following: int) -> float:
    return followers / following if following > 0 else 0.0


def classify_network_pattern(followers: int, following: int, ratio: float | None = None) -> str:
    """Label a follower/following shape. Checks run in a fixed order and the
    first match wins."""
    if ratio is None:
        ratio = follower_ratio(followers, following)
    if following > 1000 and followers < 100:
        return AGGRESSIVE_FOLLOWER
    if ratio > 100 and followers > 10_000:
        return INFLUENCER
    if ratio < 0.1 and following > 500:
        return FOLLOWER_CHASER
    if followers < 50 and following < 50:
        return NEW_ACCOUNT
    return NORMAL


def analyze_network(profile: EnrichedProfile) -> FollowerNetwork:
    metrics = profile.metrics
    followers = metrics.followers_count
    following = metrics.following_count
    ratio = follower_ratio(followers, following)
    return FollowerNetwork(
        followers_count=followers,
        following_count=following,
        ratio=ratio,
        pattern=classify_network_pattern(followers, following, ratio),
    )
