from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Callable

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from debate_guard._defaults import DEFAULT_TIMEOUT_S
from debate_guard.exceptions import ConfigurationError

from .base import EnrichedProfile, PostRecord, ProfileRecord
from .legitimacy import enrich_profile

logger = logging.getLogger(__name__)

X_API_BASE_URL = "https://api.x.com/2"

_USER_FIELDS = ",".join(
    [
        "created_at",
        "description",
        "entities",
        "id",
        "location",
        "name",
        "pinned_tweet_id",
        "profile_image_url",
        "protected",
        "public_metrics",
        "url",
        "username",
        "verified",
        "verified_type",
    ]
)
_TWEET_FIELDS = "created_at,public_metrics,entities"

# X caps max_results for the user timeline endpoint to this range.
_MIN_POSTS = 5
_MAX_POSTS = 100


class XApiProfileService:
    """Profile data service backed by the X v2 REST API."""

    def __init__(
        self,
        bearer_token: str | None = None,
        base_url: str = X_API_BASE_URL,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        token = bearer_token or os.getenv("X_API_BEARER_TOKEN", "").strip()
        if not token:
            raise ConfigurationError("X_API_BEARER_TOKEN environment variable is required")
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout_s,
        )
        self._clock = clock

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_profile(self, username: str) -> EnrichedProfile | None:
        handle = username.lstrip("@")
        response = await self._get(f"/users/by/username/{handle}", params={"user.fields": _USER_FIELDS})
        if response.status_code == 404:
            return None
        response.raise_for_status()
        data = response.json().get("data")
        if not data:
            logger.info("X API returned no data for @%s", handle)
            return None
        now: datetime | None = self._clock() if self._clock else None
        return enrich_profile(ProfileRecord.from_api(data), now=now)

    async def get_recent_posts(self, user_id: str, limit: int = 20) -> list[PostRecord]:
        params = {
            "max_results": max(_MIN_POSTS, min(_MAX_POSTS, limit)),
            "tweet.fields": _TWEET_FIELDS,
        }
        response = await self._get(f"/users/{user_id}/tweets", params=params)
        response.raise_for_status()
        rows = response.json().get("data") or []
        return [PostRecord.from_api(row) for row in rows][:limit]

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    async def _get(self, path: str, params: dict) -> httpx.Response:
        logger.debug("GET %s", path)
        return await self._client.get(path, params=params)


class NullProfileService:
    """Profile service for deployments without platform API access."""

    async def get_profile(self, username: str) -> EnrichedProfile | None:
        return None

    async def get_recent_posts(self, user_id: str, limit: int = 20) -> list[PostRecord]:
        return []
