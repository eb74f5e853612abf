from __future__ import annotations

from debate_guard.content.base import ContentItem
from debate_guard.investigation.signals import detect_content_signals, extract_keywords


def test_giveaway_post_trips_wallet_and_urgency() -> None:
    content = ContentItem.post(
        "eth_drop",
        "Send 0.5 ETH to 0xAbCdEf0123456789abcdef0123456789ABCDEF01 and get 5 back. Act now!",
    )
    signals = detect_content_signals(content)
    assert signals.has_wallet_addresses
    assert signals.has_urgency_language
    assert not signals.has_suspicious_links
    assert signals.flagged() == ["wallet addresses", "urgency language"]


def test_short_links_in_bio() -> None:
    content = ContentItem.post("promo", "New drop", author_bio="Claim here: bit.ly/free-nft")
    assert detect_content_signals(content).has_suspicious_links


def test_impersonation_wording_ignored_for_verified_accounts() -> None:
    text = "Official support: verify your wallet to keep access"
    unverified = ContentItem.post("helpdesk", text)
    verified = ContentItem.post("helpdesk", text, metadata={"verified": True})
    assert detect_content_signals(unverified).has_impersonation_signals
    assert not detect_content_signals(verified).has_impersonation_signals


def test_clean_post_has_no_signals() -> None:
    assert detect_content_signals(ContentItem.post("alice", "Lovely sunset today")).flagged() == []


def test_extract_keywords() -> None:
    bio = "Crypto educator, NFT artist & community builder!"
    assert extract_keywords(bio) == ["crypto", "educator", "artist", "community", "builder"]
    assert extract_keywords(bio, limit=2) == ["crypto", "educator"]
