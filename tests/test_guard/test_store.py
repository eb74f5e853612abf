from __future__ import annotations

import pytest

from debate_guard.factcheck.base import ClaimAssessment, ClaimType, FactCheckResult, FactCheckVerdict
from debate_guard.guard.store import RecentVerdictStore
from debate_guard.judges.base import Classification, FinalVerdict, RecommendedAction


def _verdict(classification: Classification = Classification.SCAM, confidence: int = 90) -> FinalVerdict:
    return FinalVerdict(
        classification=classification,
        confidence=confidence,
        reasoning="r",
        recommended_action=RecommendedAction.QUARANTINE,
        source="instant",
    )


class TestRecentVerdictStore:
    def test_newest_first(self) -> None:
        store = RecentVerdictStore()
        store.add("alice", "first", _verdict())
        store.add("bob", "second", _verdict())
        assert [entry.username for entry in store.recent()] == ["bob", "alice"]

    def test_capacity_evicts_oldest(self) -> None:
        store = RecentVerdictStore(capacity=3)
        for i in range(5):
            store.add(f"user{i}", "text", _verdict())
        assert len(store) == 3
        assert [entry.username for entry in store.recent()] == ["user4", "user3", "user2"]

    def test_same_post_replaces_in_place(self) -> None:
        store = RecentVerdictStore()
        store.add("alice", "Send ETH now", _verdict(confidence=70), url="https://x.com/alice/status/1")
        store.add("bob", "gm", _verdict(Classification.LEGITIMATE))
        store.add("alice", "Send ETH now", _verdict(confidence=95))

        entries = store.recent()
        assert len(entries) == 2
        assert entries[1].username == "alice"
        assert entries[1].confidence == 95
        assert entries[1].url == "https://x.com/alice/status/1"

    def test_dedupe_uses_text_prefix(self) -> None:
        store = RecentVerdictStore()
        store.add("alice", "x" * 100 + "tail one", _verdict())
        store.add("alice", "x" * 100 + "tail two", _verdict())
        assert len(store) == 1

    def test_counts_cover_every_classification(self) -> None:
        store = RecentVerdictStore()
        store.add("a", "1", _verdict(Classification.SCAM))
        store.add("b", "2", _verdict(Classification.SCAM))
        store.add("c", "3", _verdict(Classification.LEGITIMATE))
        assert store.counts() == {"legitimate": 1, "uncertain": 0, "suspicious": 0, "scam": 2}

    def test_recent_limit_and_clear(self) -> None:
        store = RecentVerdictStore()
        for i in range(4):
            store.add(f"u{i}", "t", _verdict())
        assert len(store.recent(2)) == 2
        store.clear()
        assert store.recent() == []

    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(ValueError):
            RecentVerdictStore(capacity=0)


def _fact_check(verdict: FactCheckVerdict, confidence: int = 92) -> FactCheckResult:
    return FactCheckResult(
        has_claim=True,
        claim_type=ClaimType.NEWS,
        claims=("The bridge collapsed",),
        assessment=ClaimAssessment(verdict=verdict, confidence=confidence, explanation=f"Judged {verdict.value}"),
    )


class TestFactCheckAttachment:
    def test_attaches_to_existing_entry(self) -> None:
        store = RecentVerdictStore()
        store.add("alice", "The bridge collapsed", _verdict(Classification.LEGITIMATE))
        entry = store.attach_fact_check("alice", "The bridge collapsed", _fact_check(FactCheckVerdict.FALSE), url="u")

        assert len(store) == 1
        assert entry.classification == Classification.LEGITIMATE
        assert entry.fact_check.verdict == FactCheckVerdict.FALSE
        assert entry.url == "u"
        assert store.fact_check_counts() == {"fact_checked": 1, "misinformation": 1}

    def test_unclassified_post_gets_legitimate_entry(self) -> None:
        store = RecentVerdictStore()
        entry = store.attach_fact_check("bob", "The bridge collapsed", _fact_check(FactCheckVerdict.TRUE, 80))

        assert store.recent()[0] is entry
        assert entry.classification == Classification.LEGITIMATE
        assert entry.confidence == 80
        assert entry.reasoning == "Judged true"
        assert store.fact_check_counts() == {"fact_checked": 1, "misinformation": 0}

    def test_reclassification_keeps_fact_check(self) -> None:
        store = RecentVerdictStore()
        store.attach_fact_check("bob", "The bridge collapsed", _fact_check(FactCheckVerdict.MOSTLY_FALSE))
        entry = store.add("bob", "The bridge collapsed", _verdict(Classification.SUSPICIOUS))

        assert len(store) == 1
        assert entry.classification == Classification.SUSPICIOUS
        assert entry.fact_check is not None
        assert store.fact_check_counts()["misinformation"] == 1
