from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from debate_guard.profiles.base import EnrichedProfile, PostRecord, ProfileRecord, PublicMetrics
from debate_guard.profiles.legitimacy import enrich_profile

FIXED_NOW = datetime(2025, 11, 1, tzinfo=timezone.utc)


def persona_reply(confidence: int, argument: str = "Evidence reviewed.") -> str:
    return f"CONFIDENCE: {confidence}\nARGUMENT:\n{argument}"


def plan_reply(*actions: tuple[str, str], reasoning: str = "Check the account.") -> str:
    return json.dumps(
        {
            "reasoning": reasoning,
            "actions": [
                {"tool": tool, "reason": f"Need {tool}", "priority": priority}
                for tool, priority in actions
            ],
        }
    )


class FakeCompletionService:
    """Scripted completion service.

    Replies are routed by which system prompt the caller sent. A list of
    replies is consumed in order and the last one repeats; an exception
    instance in the script is raised instead of returned.
    """

    def __init__(
        self,
        prosecutor: list[Any] | Any = None,
        defender: list[Any] | Any = None,
        planner: Any = None,
        instant: Any = None,
        image: Any = None,
        claims: Any = None,
        factcheck: Any = None,
    ) -> None:
        self.scripts: dict[str, list[Any]] = {
            "prosecutor": _as_list(prosecutor, persona_reply(50)),
            "defender": _as_list(defender, persona_reply(50)),
            "planner": _as_list(planner, plan_reply(("fetch_user_profile", "high"))),
            "instant": _as_list(instant, json.dumps({"verdict": "clean", "confidence": 90, "reason": "ok"})),
            "image": _as_list(image, "{}"),
            "claims": _as_list(claims, json.dumps({"hasClaim": False, "claimType": "none", "claims": []})),
            "factcheck": _as_list(factcheck, json.dumps({"verdict": "unverifiable", "confidence": 0})),
        }
        self.calls: list[dict[str, Any]] = []

    def count(self, route: str) -> int:
        return sum(1 for call in self.calls if call["route"] == route)

    async def complete(self, prompt: str, system_prompt: str | None = None) -> str:
        route = _route(system_prompt or "")
        self.calls.append({"route": route, "prompt": prompt, "system_prompt": system_prompt})
        return self._next(route)

    async def complete_with_image(self, image_url: str, question: str) -> str:
        self.calls.append({"route": "image", "prompt": question, "image_url": image_url})
        return self._next("image")

    def _next(self, route: str) -> Any:
        script = self.scripts[route]
        reply = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(reply, BaseException):
            raise reply
        return reply


class FakeProfileService:
    def __init__(
        self,
        profiles: dict[str, EnrichedProfile] | None = None,
        posts: list[PostRecord] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.profiles = profiles or {}
        self.posts = posts or []
        self.error = error
        self.profile_calls: list[str] = []
        self.post_calls: list[tuple[str, int]] = []

    async def get_profile(self, username: str) -> EnrichedProfile | None:
        self.profile_calls.append(username)
        if self.error is not None:
            raise self.error
        return self.profiles.get(username)

    async def get_recent_posts(self, user_id: str, limit: int = 20) -> list[PostRecord]:
        self.post_calls.append((user_id, limit))
        return list(self.posts[:limit])


def make_profile(
    username: str = "crypto_helper",
    followers: int = 12,
    following: int = 2400,
    tweets: int = 3,
    created_at: datetime | None = datetime(2025, 10, 20, tzinfo=timezone.utc),
    verified: bool = False,
    description: str | None = "Official support team. DM for help.",
    profile_image_url: str | None = None,
) -> EnrichedProfile:
    record = ProfileRecord(
        id=f"id_{username}",
        username=username,
        name=username.title(),
        description=description,
        created_at=created_at,
        verified=verified,
        profile_image_url=profile_image_url,
        public_metrics=PublicMetrics(
            followers_count=followers,
            following_count=following,
            tweet_count=tweets,
        ),
    )
    return enrich_profile(record, now=FIXED_NOW)


def _as_list(value: Any, default: Any) -> list[Any]:
    if value is None:
        return [default]
    if isinstance(value, list):
        return list(value) or [default]
    return [value]


def _route(system_prompt: str) -> str:
    if "You are the PROSECUTOR" in system_prompt:
        return "prosecutor"
    if "You are the DEFENDER" in system_prompt:
        return "defender"
    if "investigator agent" in system_prompt:
        return "planner"
    if "misinformation detection AI" in system_prompt:
        return "claims"
    if "fact-checking AI" in system_prompt:
        return "factcheck"
    return "instant"
