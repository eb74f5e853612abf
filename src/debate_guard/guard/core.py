from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from debate_guard._defaults import DEFAULT_TIMEOUT_S
from debate_guard.classifiers.instant import InstantClassifier
from debate_guard.content.base import ContentItem
from debate_guard.content.credibility import CredibleSourceFilter
from debate_guard.debate.base import DebateResult
from debate_guard.debate.engine import DebateConfig, DebateOrchestrator
from debate_guard.exceptions import ConfigurationError, InvalidContentError
from debate_guard.factcheck.base import FactCheckResult
from debate_guard.factcheck.checker import FactChecker
from debate_guard.investigation.investigator import Investigator
from debate_guard.judges.base import Classification, FinalVerdict
from debate_guard.llm.client import CompletionService
from debate_guard.profiles.base import ProfileDataService

from .store import RecentVerdictStore

DEFAULT_SCAN_CONCURRENCY = 30


@dataclass(slots=True)
class GuardStats:
    total: int = 0
    scams: int = 0
    suspicious: int = 0
    legitimate: int = 0
    skipped_credible: int = 0
    failures: int = 0
    fact_checked: int = 0
    misinformation: int = 0

    @property
    def flag_rate(self) -> float:
        return (self.scams + self.suspicious) / self.total if self.total > 0 else 0.0


@dataclass(frozen=True, slots=True)
class FeedPost:
    username: str
    text: str
    verified: bool = False
    url: str | None = None


class Guard:
    def __init__(
        self,
        orchestrator: DebateOrchestrator,
        instant_classifier: InstantClassifier,
        credibility_filter: CredibleSourceFilter | None = None,
        fact_checker: FactChecker | None = None,
        store: RecentVerdictStore | None = None,
        on_verdict: Callable[[FinalVerdict], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.instant_classifier = instant_classifier
        self.credibility_filter = credibility_filter
        self.fact_checker = fact_checker
        self.store = store
        self.on_verdict = on_verdict
        self.logger = logger or logging.getLogger(__name__)
        self._stats = GuardStats()

    @classmethod
    def from_services(
        cls,
        completion_service: CompletionService,
        profile_service: ProfileDataService,
        fast_completion_service: CompletionService | None = None,
        debate_config: DebateConfig | None = None,
        analyze_profile_image: bool = False,
        **kwargs,
    ) -> "Guard":
        investigator = Investigator(
            completion_service, profile_service, analyze_profile_image=analyze_profile_image,
        )
        orchestrator = DebateOrchestrator(completion_service, investigator, config=debate_config)
        instant = InstantClassifier(fast_completion_service or completion_service)
        if "fact_checker" not in kwargs:
            kwargs["fact_checker"] = FactChecker(
                completion_service,
                detection_service=fast_completion_service,
                credibility_filter=kwargs.get("credibility_filter"),
            )
        return cls(orchestrator=orchestrator, instant_classifier=instant, **kwargs)

    async def analyze_profile(self, username: str) -> DebateResult:
        if not username or not username.strip("@ "):
            raise InvalidContentError("username is required")
        content = ContentItem.profile(username.strip())
        result = await self.orchestrator.run_debate(content)
        self._record(result.final_verdict, content.author_username or username, "")
        return result

    async def analyze_content(self, content: ContentItem) -> DebateResult:
        result = await self.orchestrator.run_debate(content)
        self._record(result.final_verdict, content.author_username or "", content.text or "")
        return result

    async def analyze_post(
        self,
        username: str,
        text: str,
        verified: bool = False,
        url: str | None = None,
    ) -> FinalVerdict | None:
        """Instant-classify one post; ``None`` means a credible source was skipped."""
        if self.credibility_filter is not None and not self.credibility_filter.should_analyze(username, verified):
            self._stats.skipped_credible += 1
            self.logger.debug("Skipping credible source @%s", username)
            return None

        try:
            verdict = await self.instant_classifier.classify(username, text)
        except InvalidContentError:
            raise
        except Exception:
            self._stats.failures += 1
            raise
        self._record(verdict, username.lstrip("@"), text, url)
        return verdict

    async def fact_check_post(
        self,
        username: str,
        text: str,
        verified: bool = False,
        url: str | None = None,
    ) -> FactCheckResult:
        """Check a post for misinformation and attach the result to the store."""
        if self.fact_checker is None:
            raise ConfigurationError("Guard was built without a fact checker")

        result = await self.fact_checker.fact_check(username, text, verified)
        if not result.has_claim:
            return result

        handle = username.strip().lstrip("@")
        self._stats.fact_checked += 1
        if result.is_misinformation:
            self._stats.misinformation += 1
            self.logger.warning("Misinformation detected from @%s", handle)
        else:
            self.logger.info("Fact-checked @%s: %s", handle, result.verdict.value)
        if self.store is not None:
            self.store.attach_fact_check(handle, text, result, url=url)
        return result

    async def scan_feed(
        self,
        posts: list[FeedPost],
        concurrency: int = DEFAULT_SCAN_CONCURRENCY,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> list[FinalVerdict | None]:
        """Classify many posts at once, at most ``concurrency`` in flight.

        A post that fails or exceeds ``timeout_s`` yields ``None`` in its
        slot and is not retried. Output order matches input order.
        """
        sem = asyncio.Semaphore(max(1, concurrency))

        async def _scan(post: FeedPost) -> FinalVerdict | None:
            async with sem:
                try:
                    return await asyncio.wait_for(
                        self.analyze_post(post.username, post.text, post.verified, post.url),
                        timeout=timeout_s,
                    )
                except asyncio.TimeoutError:
                    self._stats.failures += 1
                    self.logger.warning("Analysis of @%s timed out after %.0fs", post.username, timeout_s)
                except InvalidContentError as exc:
                    self._stats.failures += 1
                    self.logger.warning("Skipping invalid post from @%s: %s", post.username, exc)
                except Exception as exc:
                    self.logger.warning("Analysis of @%s failed: %s", post.username, exc)
                return None

        return list(await asyncio.gather(*[_scan(post) for post in posts]))

    def _record(self, verdict: FinalVerdict, username: str, text: str, url: str | None = None) -> None:
        self._stats.total += 1
        if verdict.classification == Classification.SCAM:
            self._stats.scams += 1
            self.logger.info("Blocked scam from @%s", username)
        elif verdict.classification in (Classification.SUSPICIOUS, Classification.UNCERTAIN):
            self._stats.suspicious += 1
            self.logger.info("Flagged %s content from @%s", verdict.classification.value, username)
        else:
            self._stats.legitimate += 1

        if self.store is not None:
            self.store.add(username, text, verdict, url=url)
        if self.on_verdict:
            self.on_verdict(verdict)

    @property
    def stats(self) -> GuardStats:
        return self._stats
