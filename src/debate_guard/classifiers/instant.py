from __future__ import annotations

import logging

from debate_guard._defaults import DEFAULT_FAST_MODEL
from debate_guard.exceptions import InstantClassificationError, InvalidContentError
from debate_guard.judges.base import FinalVerdict
from debate_guard.judges.score_judge import map_instant_verdict
from debate_guard.llm.client import CompletionService, LiteLLMCompletionService
from debate_guard.utils import extract_json_object

logger = logging.getLogger(__name__)


class InstantClassifier:
    """Single-call scam check for high-volume feed scanning.

    Skips investigation and debate entirely. Unlike the debate path, a
    failed or unparseable upstream call is reported to the caller as
    :class:`InstantClassificationError` rather than softened into a
    neutral verdict.
    """

    DEFAULT_SYSTEM_PROMPT = (
        "You are GrokGuard, a CONSERVATIVE scam detection AI for X.com posts.\n\n"
        "Analyze the post and respond with ONLY this JSON format (no extra text):\n\n"
        "{\n"
        '  "verdict": "scam" | "suspicious" | "clean",\n'
        '  "confidence": 0-100,\n'
        '  "reason": "brief 1-sentence explanation"\n'
        "}\n\n"
        "ONLY flag as SCAM if you see CLEAR evidence of:\n"
        '- Crypto giveaway scams ("send X get Y back", fake airdrops)\n'
        "- Phishing links asking for wallet/credentials\n"
        "- Impersonation with malicious intent\n"
        '- "Verify your account" scams\n\n'
        "ONLY flag as SUSPICIOUS if:\n"
        "- Unverified financial claims with urgency\n"
        "- Suspicious shortened URLs with promises\n"
        "- Too-good-to-be-true offers\n\n"
        "Mark as CLEAN (default) for:\n"
        "- Normal tweets, opinions, news, jokes\n"
        "- Legitimate promotions from real brands\n"
        "- Crypto discussions without scam tactics\n"
        "- Any post without clear malicious intent\n\n"
        "BE CONSERVATIVE - only flag OBVIOUS scams. When in doubt, mark CLEAN.\n"
        "Most posts are legitimate. False positives hurt user experience."
    )

    def __init__(
        self,
        completion_service: CompletionService | None = None,
        system_prompt: str | None = None,
    ) -> None:
        self.completion_service = completion_service or LiteLLMCompletionService(
            model=DEFAULT_FAST_MODEL, temperature=0.1, max_tokens=100,
        )
        self.system_prompt = system_prompt or self.DEFAULT_SYSTEM_PROMPT

    async def classify(self, username: str, text: str) -> FinalVerdict:
        if not username or not username.strip("@ "):
            raise InvalidContentError("username is required for instant classification")
        if not text or not text.strip():
            raise InvalidContentError("text is required for instant classification")

        handle = username.strip().lstrip("@")
        prompt = f'POST from @{handle}: "{text}"\n\nAnalyze NOW and return ONLY JSON:'
        try:
            raw_content = await self.completion_service.complete(prompt, self.system_prompt)
        except Exception as exc:
            logger.warning("Instant analysis call failed for @%s: %s", handle, exc)
            raise InstantClassificationError(handle, str(exc) or type(exc).__name__) from exc

        extraction = extract_json_object(raw_content)
        if not extraction.ok:
            logger.warning("Instant analysis for @%s unparseable: %s", handle, extraction.error)
            raise InstantClassificationError(
                handle, f"{extraction.error}: {str(raw_content)[:200]}",
            )

        verdict = map_instant_verdict(extraction.value)
        logger.info(
            "Instant verdict for @%s: %s (%d%%)",
            handle,
            verdict.classification.value,
            verdict.confidence,
        )
        return verdict
