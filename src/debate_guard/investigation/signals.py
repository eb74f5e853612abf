from __future__ import annotations

import re

from debate_guard.content.base import ContentItem

from .base import ContentSignals

_WALLET_RE = re.compile(r"0x[a-f0-9]{40}|bc1[a-z0-9]{39,59}", re.IGNORECASE)
_SHORT_LINK_RE = re.compile(r"bit\.ly|tinyurl|short\.link", re.IGNORECASE)
_URGENCY_RE = re.compile(r"limited time|act now|hurry|expires soon|last chance", re.IGNORECASE)
_IMPERSONATION_RE = re.compile(r"official|verify|support|team", re.IGNORECASE)
_NON_WORD_RE = re.compile(r"[^\w\s]")


def detect_content_signals(content: ContentItem) -> ContentSignals:
    combined = f"{content.text or ''} {content.author_bio or ''}".lower()
    verified = bool(content.metadata.get("verified"))
    return ContentSignals(
        has_wallet_addresses=bool(_WALLET_RE.search(combined)),
        has_suspicious_links=bool(_SHORT_LINK_RE.search(combined)),
        has_urgency_language=bool(_URGENCY_RE.search(combined)),
        has_impersonation_signals=bool(_IMPERSONATION_RE.search(combined)) and not verified,
    )


def extract_keywords(bio: str, limit: int = 5) -> list[str]:
    words = _NON_WORD_RE.sub(" ", bio.lower()).split()
    return [word for word in words if len(word) > 4][:limit]
