from __future__ import annotations

import asyncio
import json
import unittest

from debate_guard.classifiers.instant import InstantClassifier
from debate_guard.content.base import ContentItem
from debate_guard.content.credibility import CredibleSourceFilter
from debate_guard.exceptions import ConfigurationError, InstantClassificationError, InvalidContentError
from debate_guard.guard.core import FeedPost, Guard
from debate_guard.guard.store import RecentVerdictStore
from debate_guard.judges.base import Classification
from tests.helpers import FakeCompletionService, FakeProfileService, make_profile, persona_reply


def _instant(verdict: str, confidence: int = 90) -> str:
    return json.dumps({"verdict": verdict, "confidence": confidence, "reason": f"{verdict} post"})


class _SlowCompletionService(FakeCompletionService):
    async def complete(self, prompt: str, system_prompt: str | None = None) -> str:
        if "@slowpoke" in prompt:
            await asyncio.sleep(1)
        return await super().complete(prompt, system_prompt)


class GuardTests(unittest.IsolatedAsyncioTestCase):
    async def test_analyze_profile_runs_debate_and_records(self) -> None:
        service = FakeCompletionService(prosecutor=persona_reply(90), defender=persona_reply(20))
        profiles = FakeProfileService(profiles={"crypto_helper": make_profile()})
        store = RecentVerdictStore()
        seen = []
        guard = Guard.from_services(service, profiles, store=store, on_verdict=seen.append)

        result = await guard.analyze_profile("@crypto_helper")

        self.assertEqual(result.final_verdict.classification, Classification.SCAM)
        self.assertEqual(profiles.profile_calls, ["crypto_helper"])
        self.assertEqual(guard.stats.total, 1)
        self.assertEqual(guard.stats.scams, 1)
        self.assertEqual(store.recent()[0].username, "crypto_helper")
        self.assertEqual(seen, [result.final_verdict])

    async def test_analyze_profile_requires_username(self) -> None:
        guard = Guard.from_services(FakeCompletionService(), FakeProfileService())
        with self.assertRaises(InvalidContentError):
            await guard.analyze_profile(" @ ")

    async def test_analyze_content(self) -> None:
        service = FakeCompletionService(prosecutor=persona_reply(10), defender=persona_reply(95))
        guard = Guard.from_services(service, FakeProfileService())
        result = await guard.analyze_content(ContentItem.post("alice", "Lovely sunset"))
        self.assertEqual(result.final_verdict.classification, Classification.LEGITIMATE)
        self.assertEqual(guard.stats.legitimate, 1)

    async def test_analyze_post_uses_fast_service(self) -> None:
        slow = FakeCompletionService()
        fast = FakeCompletionService(instant=_instant("suspicious", 70))
        guard = Guard.from_services(slow, FakeProfileService(), fast_completion_service=fast)

        verdict = await guard.analyze_post("@promo", "Huge returns, DM me", url="https://x.com/promo/status/9")

        self.assertEqual(verdict.classification, Classification.SUSPICIOUS)
        self.assertEqual(fast.count("instant"), 1)
        self.assertEqual(slow.calls, [])
        self.assertEqual(guard.stats.suspicious, 1)

    async def test_credible_sources_are_skipped(self) -> None:
        service = FakeCompletionService(instant=_instant("scam"))
        guard = Guard.from_services(service, FakeProfileService(), credibility_filter=CredibleSourceFilter())

        self.assertIsNone(await guard.analyze_post("@Reuters", "Markets fall sharply", verified=True))
        self.assertIsNone(await guard.analyze_post("bbcworld", "Election results", verified=True))
        self.assertEqual(guard.stats.skipped_credible, 2)
        self.assertEqual(guard.stats.total, 0)
        self.assertEqual(service.calls, [])

    async def test_lookalike_and_unverified_handles_are_analyzed(self) -> None:
        service = FakeCompletionService(instant=_instant("scam"))
        guard = Guard.from_services(service, FakeProfileService(), credibility_filter=CredibleSourceFilter())
        posts = [
            FeedPost("elonmusk_giveaway", "Send 1 ETH get 2 back!", verified=True),
            FeedPost("crypto_airdrop_app", "Claim your airdrop now"),
            FeedPost("Reuters", "Send 1 ETH get 2 back!"),
            FeedPost("random_person", "Send 1 ETH get 2 back!", verified=True),
        ]

        verdicts = await guard.scan_feed(posts)

        self.assertEqual([v.classification for v in verdicts], [Classification.SCAM] * 4)
        self.assertEqual(guard.stats.skipped_credible, 0)
        self.assertEqual(guard.stats.scams, 4)
        self.assertEqual(service.count("instant"), 4)

    async def test_instant_failure_is_counted_and_raised(self) -> None:
        guard = Guard.from_services(FakeCompletionService(instant="not json"), FakeProfileService())
        with self.assertRaises(InstantClassificationError):
            await guard.analyze_post("alice", "gm")
        self.assertEqual(guard.stats.failures, 1)

    async def test_scan_feed_keeps_order_and_absorbs_failures(self) -> None:
        service = FakeCompletionService(
            instant=[_instant("scam"), _instant("clean"), RuntimeError("overloaded")],
        )
        guard = Guard.from_services(service, FakeProfileService(), credibility_filter=CredibleSourceFilter())
        posts = [
            FeedPost("eth_drop", "Send 1 ETH get 2"),
            FeedPost("bbcnews", "Breaking news", verified=True),
            FeedPost("alice", "gm"),
            FeedPost("bob", "gn"),
            FeedPost("carol", ""),
        ]

        verdicts = await guard.scan_feed(posts, concurrency=1)

        self.assertEqual(len(verdicts), 5)
        self.assertEqual(verdicts[0].classification, Classification.SCAM)
        self.assertIsNone(verdicts[1])
        self.assertEqual(verdicts[2].classification, Classification.LEGITIMATE)
        self.assertIsNone(verdicts[3])
        self.assertIsNone(verdicts[4])
        stats = guard.stats
        self.assertEqual((stats.total, stats.scams, stats.legitimate), (2, 1, 1))
        self.assertEqual(stats.skipped_credible, 1)
        self.assertEqual(stats.failures, 2)
        self.assertAlmostEqual(stats.flag_rate, 0.5)

    async def test_scan_feed_times_out_slow_posts(self) -> None:
        service = _SlowCompletionService(instant=_instant("clean"))
        guard = Guard.from_services(service, FakeProfileService())
        posts = [FeedPost("slowpoke", "zzz"), FeedPost("alice", "gm")]

        verdicts = await guard.scan_feed(posts, timeout_s=0.05)

        self.assertIsNone(verdicts[0])
        self.assertEqual(verdicts[1].classification, Classification.LEGITIMATE)
        self.assertEqual(guard.stats.failures, 1)


class GuardFactCheckTests(unittest.IsolatedAsyncioTestCase):
    async def test_fact_check_updates_stats_and_store(self) -> None:
        claims = json.dumps({"hasClaim": True, "claimType": "news", "claims": ["The dam burst"], "searchQueries": []})
        service = FakeCompletionService(
            claims=claims,
            factcheck=[
                json.dumps({"verdict": "false", "confidence": 94, "explanation": "No such event"}),
                json.dumps({"verdict": "true", "confidence": 90, "explanation": "Confirmed"}),
            ],
        )
        store = RecentVerdictStore()
        guard = Guard.from_services(service, FakeProfileService(), store=store)

        first = await guard.fact_check_post("@rumours", "The dam burst overnight!", url="https://x.com/r/1")
        second = await guard.fact_check_post("reporter", "The dam burst overnight, officials confirm")

        self.assertTrue(first.is_misinformation)
        self.assertFalse(second.is_misinformation)
        self.assertEqual((guard.stats.fact_checked, guard.stats.misinformation), (2, 1))
        self.assertEqual(guard.stats.total, 0)
        self.assertEqual(store.fact_check_counts(), {"fact_checked": 2, "misinformation": 1})
        self.assertEqual(store.recent()[1].url, "https://x.com/r/1")

    async def test_post_without_claims_is_not_counted(self) -> None:
        store = RecentVerdictStore()
        guard = Guard.from_services(FakeCompletionService(), FakeProfileService(), store=store)

        result = await guard.fact_check_post("alice", "gm")

        self.assertFalse(result.has_claim)
        self.assertEqual(guard.stats.fact_checked, 0)
        self.assertEqual(len(store), 0)

    async def test_fact_check_uses_fast_service_for_detection(self) -> None:
        slow = FakeCompletionService()
        fast = FakeCompletionService()
        guard = Guard.from_services(slow, FakeProfileService(), fast_completion_service=fast)

        await guard.fact_check_post("alice", "80% of people agree")

        self.assertEqual(fast.count("claims"), 1)
        self.assertEqual(slow.count("claims"), 0)

    async def test_requires_a_fact_checker(self) -> None:
        guard = Guard(
            orchestrator=Guard.from_services(FakeCompletionService(), FakeProfileService()).orchestrator,
            instant_classifier=InstantClassifier(FakeCompletionService()),
        )
        with self.assertRaises(ConfigurationError):
            await guard.fact_check_post("alice", "80% of people agree")


if __name__ == "__main__":
    unittest.main()
