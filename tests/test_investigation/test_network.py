from __future__ import annotations

import pytest

from debate_guard.investigation.network import (
    AGGRESSIVE_FOLLOWER,
    FOLLOWER_CHASER,
    INFLUENCER,
    NEW_ACCOUNT,
    NORMAL,
    analyze_network,
    classify_network_pattern,
    follower_ratio,
)
from tests.helpers import make_profile


@pytest.mark.parametrize(
    ("followers", "following", "expected"),
    [
        (50, 2000, AGGRESSIVE_FOLLOWER),
        (50_000, 100, INFLUENCER),
        (10, 10, NEW_ACCOUNT),
        (500, 500, NORMAL),
        (40, 900, FOLLOWER_CHASER),
        # following > 1000 with few followers is a bot before it is a chaser
        (99, 1001, AGGRESSIVE_FOLLOWER),
        # huge ratio but under 10k followers is not an influencer
        (9_000, 10, NORMAL),
    ],
)
def test_classify_network_pattern(followers: int, following: int, expected: str) -> None:
    assert classify_network_pattern(followers, following) == expected


def test_zero_following_has_zero_ratio() -> None:
    assert follower_ratio(1_000_000, 0) == 0.0
    # ratio 0 with nobody followed never reads as a follower chaser
    assert classify_network_pattern(1_000_000, 0) == NORMAL


def test_analyze_network_from_profile() -> None:
    network = analyze_network(make_profile(followers=12, following=2400))
    assert network.followers_count == 12
    assert network.following_count == 2400
    assert network.ratio == pytest.approx(0.005)
    assert network.pattern == AGGRESSIVE_FOLLOWER
