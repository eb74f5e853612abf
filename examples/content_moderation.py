"""Scam moderation with a prosecutor/defender debate and the instant fast path.

Requires XAI_API_KEY and X_API_BEARER_TOKEN in your environment.
"""
from __future__ import annotations

import asyncio

from debate_guard import ContentItem, DebateConfig, Guard
from debate_guard.content.credibility import CredibleSourceFilter
from debate_guard.guard.core import FeedPost
from debate_guard.guard.store import RecentVerdictStore
from debate_guard.llm.client import LiteLLMCompletionService
from debate_guard.profiles.x_api import XApiProfileService


async def main() -> None:
    profiles = XApiProfileService()
    store = RecentVerdictStore(capacity=50)
    guard = Guard.from_services(
        LiteLLMCompletionService(),
        profiles,
        fast_completion_service=LiteLLMCompletionService(model="xai/grok-3-mini", temperature=0.1, max_tokens=100),
        debate_config=DebateConfig(max_rounds=3),
        credibility_filter=CredibleSourceFilter(),
        store=store,
    )

    try:
        result = await guard.analyze_content(
            ContentItem.post("elonmusk_giveaway", "Send 0.5 ETH, get 5 ETH back! Limited time only.")
        )
        verdict = result.final_verdict
        print(f"Classification: {verdict.classification.value}")
        print(f"Action:         {verdict.recommended_action.value}")
        print(f"Score:          {verdict.confidence}/100")
        print(f"Consensus:      {result.consensus_reached} after {result.total_rounds} round(s)")
        for line in result.investigation.execution_log:
            print(f"  {line}")

        feed = [
            FeedPost("airdrop_official", "Claim your free tokens now: bit.ly/claim-drop"),
            FeedPost("Reuters", "Central bank holds rates steady", verified=True),
            FeedPost("alice", "gm, coffee first"),
        ]
        for post, fast in zip(feed, await guard.scan_feed(feed)):
            label = fast.classification.value if fast else "skipped/failed"
            print(f"@{post.username}: {label}")

        check = await guard.fact_check_post("viral_stats", "90% of new cars sold last year were electric.")
        if check.has_claim:
            print(f"\nFact-check: {check.verdict.value} - {check.assessment.community_note}")

        print(f"\nStore counts: {store.counts()} {store.fact_check_counts()}")
        print(f"Flag rate:    {guard.stats.flag_rate:.0%}")
    finally:
        await profiles.aclose()


if __name__ == "__main__":
    asyncio.run(main())
