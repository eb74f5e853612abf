from .core import FeedPost, Guard, GuardStats
from .store import RecentVerdictStore, StoredVerdict

__all__ = [
    "FeedPost",
    "Guard",
    "GuardStats",
    "RecentVerdictStore",
    "StoredVerdict",
]
