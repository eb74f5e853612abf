from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable

from debate_guard.content.base import ContentItem
from debate_guard.llm.client import CompletionService
from debate_guard.profiles.base import EnrichedProfile, PostRecord, ProfileDataService
from debate_guard.utils import coerce_confidence, extract_json_object

from .base import (
    InvestigationPlan,
    InvestigationResult,
    InvestigationTool,
    PlannedAction,
    Priority,
    ProfileImageAnalysis,
)
from .network import analyze_network
from .signals import detect_content_signals, extract_keywords

logger = logging.getLogger(__name__)

INVESTIGATOR_SYSTEM_PROMPT = """You are an autonomous investigator agent for X.com content moderation.

Your job is to PLAN an investigation strategy based on the content provided.

You have access to these TOOLS:
1. fetch_user_profile - Get detailed user profile (age, verification, metrics)
2. fetch_user_posts - Get user's recent posts (up to 100)
3. search_similar_bios - Find accounts with similar bios (impersonator detection)
4. check_follower_network - Analyze follower/following patterns

Based on the content, decide which tools to use and in what order.

Output your plan as JSON:
{
  "reasoning": "Why these tools are needed",
  "actions": [
    {
      "tool": "fetch_user_profile",
      "reason": "Need to check account age and verification",
      "priority": "high"
    }
  ]
}

IMPORTANT:
- Prioritize tools that give most signal for least cost
- Always fetch user profile first (it's fast and essential)
- Only fetch posts if content is suspicious (it's slow)
- Search similar bios only for potential impersonators
- Check network only for suspected bot/scam rings

Output ONLY valid JSON."""

IMAGE_ANALYSIS_PROMPT = """Analyze this profile image and determine:

1. Is this a stock photo? (0-100% confidence)
2. Is this AI-generated? (0-100% confidence)
3. What makes it look authentic or fake?
4. Common scam account patterns: generic model photos, AI-generated faces, stolen celebrity pics

Output JSON:
{
  "isStockPhoto": boolean,
  "stockPhotoConfidence": 0-100,
  "isAIGenerated": boolean,
  "aiGeneratedConfidence": 0-100,
  "explanation": "brief analysis",
  "scamIndicators": ["list of red flags"]
}

Be precise. Many real users have professional photos - focus on PATTERNS that indicate malicious use."""

MIN_BIO_LENGTH_FOR_SEARCH = 20
RECENT_POSTS_LIMIT = 20


class _ExecutionLog:
    def __init__(self, clock: Callable[[], datetime]) -> None:
        self._clock = clock
        self.entries: list[str] = []

    def __call__(self, message: str) -> None:
        self.entries.append(f"[{self._clock().isoformat()}] {message}")
        logger.debug(message)


class Investigator:
    """Plans which evidence to gather for a piece of content, then gathers it.

    Planning asks the completion service for a JSON plan; anything it cannot
    use is replaced by the single fetch-profile fallback. Each planned action
    then runs against the profile service, and a failing action is logged
    and skipped without stopping the rest. ``investigate`` never raises for
    upstream problems.
    """

    def __init__(
        self,
        completion_service: CompletionService,
        profile_service: ProfileDataService,
        analyze_profile_image: bool = False,
        posts_limit: int = RECENT_POSTS_LIMIT,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.completion_service = completion_service
        self.profile_service = profile_service
        self.analyze_profile_image = analyze_profile_image
        self.posts_limit = posts_limit
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def investigate(self, content: ContentItem) -> InvestigationResult:
        log = _ExecutionLog(self._clock)
        log("Starting autonomous investigation")

        plan = await self.plan(content, log)
        log(f"Investigation plan created with {len(plan.actions)} actions")

        result = InvestigationResult(plan=plan, content_signals=detect_content_signals(content))
        flagged = result.content_signals.flagged()
        if flagged:
            log(f"Content signals: {', '.join(flagged)}")

        for action in plan.actions:
            log(f"Executing: {action.tool.value} ({action.priority.value} priority)")
            try:
                await self._execute(action, content, result, log)
            except Exception as exc:
                logger.warning("Investigation action %s failed: %s", action.tool.value, exc)
                log(f"❌ {action.tool.value} failed: {exc}")
                continue
            log(f"✅ {action.tool.value} completed")

        if self.analyze_profile_image and content.author_profile_image:
            result.profile_image_analysis = await self._analyze_image(content.author_profile_image, log)

        result.execution_log = log.entries
        return result

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    async def plan(self, content: ContentItem, log: Callable[[str], None] | None = None) -> InvestigationPlan:
        log = log or _ExecutionLog(self._clock)
        try:
            response = await self.completion_service.complete(
                build_planning_prompt(content), INVESTIGATOR_SYSTEM_PROMPT,
            )
        except Exception as exc:
            logger.warning("Investigation planning call failed: %s", exc)
            log(f"Planning failed ({exc}); using fallback plan")
            return InvestigationPlan.fallback()

        plan = parse_plan(response)
        if plan is None:
            logger.warning("Investigator returned no usable plan; using fallback.")
            log("No usable plan in investigator response; using fallback plan")
            return InvestigationPlan.fallback()
        return plan.sorted_by_priority()

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    async def _execute(
        self,
        action: PlannedAction,
        content: ContentItem,
        result: InvestigationResult,
        log: Callable[[str], None],
    ) -> None:
        if action.tool == InvestigationTool.FETCH_USER_PROFILE:
            if not content.author_username:
                raise ValueError("no author username to look up")
            result.user_profile = await self._fetch_profile(content.author_username, log)

        elif action.tool == InvestigationTool.FETCH_USER_POSTS:
            author_id = content.author_id or (result.user_profile.id if result.user_profile else None)
            result.user_posts = await self._fetch_posts(author_id, log)

        elif action.tool == InvestigationTool.SEARCH_SIMILAR_BIOS:
            bio = content.author_bio or (result.user_profile.record.description if result.user_profile else None)
            result.similar_accounts = self._search_similar_bios(bio, log)

        elif action.tool == InvestigationTool.CHECK_FOLLOWER_NETWORK:
            if result.user_profile is None:
                log("  ✗ No profile to analyze")
                result.follower_network = None
                return
            network = analyze_network(result.user_profile)
            log(f"  → Analyzing network: {network.followers_count} followers / {network.following_count} following")
            log(f"  ✓ Network pattern: {network.pattern}")
            result.follower_network = network

    async def _fetch_profile(self, username: str, log: Callable[[str], None]) -> EnrichedProfile | None:
        log(f"  → Fetching profile for @{username}")
        profile = await self.profile_service.get_profile(username)
        if profile is None:
            log("  ✗ Profile not found")
            return None
        log(
            f"  ✓ Found: {profile.metrics.followers_count} followers, "
            f"{profile.assessment.account_age_years}y old"
        )
        return profile

    async def _fetch_posts(self, user_id: str | None, log: Callable[[str], None]) -> list[PostRecord]:
        if not user_id:
            log("  ✗ Cannot fetch posts - no user ID")
            return []
        log(f"  → Fetching recent posts for user {user_id}")
        posts = await self.profile_service.get_recent_posts(user_id, self.posts_limit)
        log(f"  ✓ Retrieved {len(posts)} posts")
        return posts

    def _search_similar_bios(self, bio: str | None, log: Callable[[str], None]) -> list[Any]:
        if not bio or len(bio) < MIN_BIO_LENGTH_FOR_SEARCH:
            log("  ✗ Bio too short to search")
            return []
        keywords = extract_keywords(bio)
        log(f"  → Searching for accounts with keywords: {', '.join(keywords)}")
        # TODO: wire to the X full-archive search endpoint once the project has access to it.
        log("  ⚠ Search similar bios not implemented (requires X API search)")
        return []

    async def _analyze_image(self, image_url: str, log: Callable[[str], None]) -> ProfileImageAnalysis | None:
        log("Analyzing profile image")
        try:
            response = await self.completion_service.complete_with_image(image_url, IMAGE_ANALYSIS_PROMPT)
        except Exception as exc:
            logger.warning("Profile image analysis failed: %s", exc)
            log(f"❌ profile image analysis failed: {exc}")
            return None

        extraction = extract_json_object(response)
        if not extraction.ok:
            log(f"✗ Profile image analysis unparseable: {extraction.error}")
            return None
        data = extraction.value
        analysis = ProfileImageAnalysis(
            is_stock_photo=bool(data.get("isStockPhoto", False)),
            is_ai_generated=bool(data.get("isAIGenerated", False)),
            confidence=max(
                coerce_confidence(data.get("stockPhotoConfidence"), default=0),
                coerce_confidence(data.get("aiGeneratedConfidence"), default=0),
            ),
            explanation=str(data.get("explanation") or "No explanation provided"),
        )
        log(f"✓ Profile image: stock={analysis.is_stock_photo} ai={analysis.is_ai_generated}")
        return analysis


def build_planning_prompt(content: ContentItem) -> str:
    metadata = json.dumps(dict(content.metadata), indent=2, default=str) if content.metadata else "None available"
    return (
        "Plan an investigation for this X.com content:\n\n"
        "**CONTENT:**\n"
        f"Type: {content.kind.value}\n"
        f'Text: "{content.text or "N/A"}"\n'
        f"Author: @{content.author_username or 'Unknown'}\n"
        f'Bio: "{content.author_bio or "N/A"}"\n\n'
        "**METADATA:**\n"
        f"{metadata}\n\n"
        "Based on this content, which tools should I use to investigate? Output your plan as JSON."
    )


def parse_plan(response: str) -> InvestigationPlan | None:
    """Turn a planner response into a plan, or ``None`` if nothing usable came back.

    Unknown tools are dropped; an unknown priority is treated as low.
    """
    extraction = extract_json_object(response)
    if not extraction.ok:
        return None
    raw_actions = extraction.value.get("actions")
    if not isinstance(raw_actions, list):
        return None

    actions: list[PlannedAction] = []
    for raw in raw_actions:
        if not isinstance(raw, dict):
            continue
        try:
            tool = InvestigationTool(str(raw.get("tool", "")).strip())
        except ValueError:
            logger.debug("Dropping unknown investigation tool %r", raw.get("tool"))
            continue
        try:
            priority = Priority(str(raw.get("priority", "")).strip().lower())
        except ValueError:
            priority = Priority.LOW
        actions.append(PlannedAction(tool=tool, reason=str(raw.get("reason", "")), priority=priority))

    if not actions:
        return None
    return InvestigationPlan(reasoning=str(extraction.value.get("reasoning", "")), actions=tuple(actions))
