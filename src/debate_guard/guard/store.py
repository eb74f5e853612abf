from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass
from datetime import datetime, timezone

from debate_guard.factcheck.base import FactCheckResult
from debate_guard.judges.base import Classification, FinalVerdict

_DEDUP_PREFIX_CHARS = 100


@dataclass(slots=True)
class StoredVerdict:
    username: str
    text: str
    classification: Classification
    confidence: int
    reasoning: str
    timestamp: datetime
    url: str | None = None
    fact_check: FactCheckResult | None = None

    @property
    def key(self) -> tuple[str, str]:
        return self.username, self.text[:_DEDUP_PREFIX_CHARS]


class RecentVerdictStore:
    """Keeps the most recent ``capacity`` verdicts, newest first.

    A verdict for a post already in the store (same author, same opening
    text) replaces the stored one in place instead of adding a duplicate.
    """

    def __init__(self, capacity: int = 100) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._entries: deque[StoredVerdict] = deque(maxlen=capacity)

    def add(self, username: str, text: str, verdict: FinalVerdict, url: str | None = None) -> StoredVerdict:
        entry = StoredVerdict(
            username=username,
            text=text,
            classification=verdict.classification,
            confidence=verdict.confidence,
            reasoning=verdict.reasoning,
            timestamp=datetime.now(timezone.utc),
            url=url,
        )
        existing = self._find(entry.key)
        if existing is not None:
            idx, previous = existing
            if url is None:
                entry.url = previous.url
            entry.fact_check = previous.fact_check
            self._entries[idx] = entry
            return entry
        self._entries.appendleft(entry)
        return entry

    def attach_fact_check(
        self,
        username: str,
        text: str,
        result: FactCheckResult,
        url: str | None = None,
    ) -> StoredVerdict:
        """Attach a fact-check to the stored post, adding a legitimate entry if it was never classified."""
        existing = self._find((username, text[:_DEDUP_PREFIX_CHARS]))
        if existing is not None:
            entry = existing[1]
            entry.fact_check = result
            if not entry.reasoning and result.assessment is not None:
                entry.reasoning = result.assessment.explanation
            if entry.url is None:
                entry.url = url
            return entry

        assessment = result.assessment
        reasoning = "Post contains verifiable claims"
        if assessment is not None and (assessment.explanation or assessment.community_note):
            reasoning = assessment.explanation or assessment.community_note
        entry = StoredVerdict(
            username=username,
            text=text,
            classification=Classification.LEGITIMATE,
            confidence=assessment.confidence if assessment else 0,
            reasoning=reasoning,
            timestamp=datetime.now(timezone.utc),
            url=url,
            fact_check=result,
        )
        self._entries.appendleft(entry)
        return entry

    def recent(self, limit: int | None = None) -> list[StoredVerdict]:
        entries = list(self._entries)
        return entries if limit is None else entries[:limit]

    def counts(self) -> dict[str, int]:
        counter = Counter(entry.classification for entry in self._entries)
        return {classification.value: counter.get(classification, 0) for classification in Classification}

    def fact_check_counts(self) -> dict[str, int]:
        checked = [entry.fact_check for entry in self._entries if entry.fact_check and entry.fact_check.has_claim]
        return {
            "fact_checked": len(checked),
            "misinformation": sum(1 for result in checked if result.is_misinformation),
        }

    def clear(self) -> None:
        self._entries.clear()

    def _find(self, key: tuple[str, str]) -> tuple[int, StoredVerdict] | None:
        for idx, entry in enumerate(self._entries):
            if entry.key == key:
                return idx, entry
        return None

    def __len__(self) -> int:
        return len(self._entries)
