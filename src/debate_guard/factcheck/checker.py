from __future__ import annotations

import logging
from typing import Sequence

from debate_guard._defaults import DEFAULT_FAST_MODEL, DEFAULT_MODEL
from debate_guard.content.credibility import CredibleSourceFilter
from debate_guard.exceptions import InvalidContentError
from debate_guard.llm.client import CompletionService, LiteLLMCompletionService
from debate_guard.utils import extract_json_object

from .base import ClaimAssessment, ClaimDetection, FactCheckResult

logger = logging.getLogger(__name__)

# A credible source is only called false with at least this much confidence.
CREDIBLE_SOURCE_MIN_CONFIDENCE = 90


class FactChecker:
    """Two-step misinformation check: detect verifiable claims, then judge the main one.

    Upstream failures never raise; they degrade to "no claim" during
    detection and to an ``unverifiable`` assessment during checking. When a
    :class:`CredibleSourceFilter` is supplied, posts from credible accounts
    are still checked, but with a conservative prompt and with low-confidence
    ``false``/``mostly_false`` verdicts softened to ``unverifiable``.
    """

    CLAIM_DETECTION_PROMPT = (
        "You are a misinformation detection AI. Analyze posts for factual claims that can be verified.\n\n"
        "Respond with ONLY JSON:\n"
        "{\n"
        '  "hasClaim": true/false,\n'
        '  "claimType": "statistic" | "news" | "scientific" | "political" | "none",\n'
        '  "claims": ["list of specific factual claims made"],\n'
        '  "searchQueries": ["optimized search queries to verify these claims"]\n'
        "}\n\n"
        "ONLY flag posts with VERIFIABLE factual claims like:\n"
        '- Statistics or numbers ("X% of people...")\n'
        '- News events ("X happened yesterday...")\n'
        '- Scientific claims ("Studies show...")\n'
        '- Political statements ("X voted for...")\n\n'
        "DO NOT flag:\n"
        "- Opinions or jokes\n"
        "- Personal experiences\n"
        "- Clearly labeled satire\n"
        "- Vague statements"
    )

    FACT_CHECK_PROMPT = (
        "You are a fact-checking AI. Given a claim and search context, determine its accuracy.\n\n"
        "CRITICAL RULES FOR CREDIBLE SOURCES:\n"
        "- If the source is a verified account, major news organization, or established institution, "
        "you MUST be EXTREMELY CONSERVATIVE\n"
        '- For credible sources: Only flag as "false" if you have 95%+ confidence with MULTIPLE '
        "independent, authoritative sources that directly contradict the claim\n"
        '- When uncertain with credible sources, default to "unverifiable" rather than "false"\n\n'
        "Respond with ONLY JSON:\n"
        "{\n"
        '  "verdict": "true" | "mostly_true" | "mixed" | "mostly_false" | "false" | "unverifiable",\n'
        '  "confidence": 0-100,\n'
        '  "explanation": "Brief explanation of the verdict",\n'
        '  "sources": ["List of source descriptions"],\n'
        '  "context": "Additional context that helps understand this claim",\n'
        '  "communityNote": "A helpful community note explaining the full picture"\n'
        "}\n\n"
        "Be fair and balanced. Consider multiple perspectives, partial truths, missing context "
        "and source reliability. When in doubt, mark as \"unverifiable\" rather than \"false\"."
    )

    def __init__(
        self,
        completion_service: CompletionService | None = None,
        detection_service: CompletionService | None = None,
        credibility_filter: CredibleSourceFilter | None = None,
    ) -> None:
        self.completion_service = completion_service or LiteLLMCompletionService(
            model=DEFAULT_MODEL, temperature=0.2, max_tokens=500,
        )
        if detection_service is None:
            detection_service = completion_service or LiteLLMCompletionService(
                model=DEFAULT_FAST_MODEL, temperature=0.1, max_tokens=200,
            )
        self.detection_service = detection_service
        self.credibility_filter = credibility_filter

    async def detect_claims(self, username: str, text: str) -> ClaimDetection:
        prompt = f'POST from @{username}:\n"{text}"\n\nAnalyze for factual claims:'
        try:
            raw = await self.detection_service.complete(prompt, self.CLAIM_DETECTION_PROMPT)
        except Exception as exc:
            logger.warning("Claim detection failed for @%s: %s", username, exc)
            return ClaimDetection.none()
        extraction = extract_json_object(raw)
        if not extraction.ok:
            logger.warning("Claim detection for @%s unparseable: %s", username, extraction.error)
            return ClaimDetection.none()
        return ClaimDetection.from_payload(extraction.value)

    async def assess_claim(
        self,
        claim: str,
        search_queries: Sequence[str],
        original_post: str,
        username: str | None = None,
        credible: bool = False,
    ) -> ClaimAssessment:
        source = f"@{username or 'unknown'}"
        credibility_note = ""
        if credible:
            source += " (VERIFIED/CREDIBLE SOURCE)"
            credibility_note = (
                f"\n\nCREDIBILITY WARNING: This post is from @{username}, a verified/credible source. "
                "Be EXTREMELY conservative - only flag as false if you have 95%+ confidence with multiple "
                'independent sources contradicting the claim. When uncertain, mark as "unverifiable".'
            )
        queries = "\n".join(search_queries)
        prompt = (
            f'CLAIM TO VERIFY:\n"{claim}"\n\n'
            f'ORIGINAL POST:\n"{original_post}"\n\n'
            f"SOURCE: {source}\n\n"
            "SEARCH QUERIES TO CONSIDER:\n"
            f"{queries}"
            f"{credibility_note}\n\n"
            "Using your knowledge and reasoning, fact-check this claim. Provide sources and context."
        )
        try:
            raw = await self.completion_service.complete(prompt, self.FACT_CHECK_PROMPT)
        except Exception as exc:
            logger.warning("Fact-check call failed for claim %r: %s", claim[:80], exc)
            return ClaimAssessment.unverifiable("Error during fact-checking")
        extraction = extract_json_object(raw)
        if not extraction.ok:
            logger.warning("Fact-check reply unparseable: %s", extraction.error)
            return ClaimAssessment.unverifiable("Could not verify this claim")
        return ClaimAssessment.from_payload(extraction.value)

    async def fact_check(self, username: str, text: str, verified: bool = False) -> FactCheckResult:
        if not username or not username.strip("@ "):
            raise InvalidContentError("username is required for fact-checking")
        if not text or not text.strip():
            raise InvalidContentError("text is required for fact-checking")

        handle = username.strip().lstrip("@")
        credible = self.credibility_filter is not None and self.credibility_filter.is_credible(handle, verified)
        if credible:
            logger.info("Fact-checking credible source @%s conservatively", handle)

        detection = await self.detect_claims(handle, text)
        if not detection.has_claim:
            logger.debug("No verifiable claims from @%s", handle)
            return FactCheckResult(has_claim=False, credible_source=credible)

        assessment = await self.assess_claim(
            detection.claims[0], detection.search_queries, text, username=handle, credible=credible,
        )
        if (
            credible
            and assessment.verdict.is_misinformation
            and assessment.confidence < CREDIBLE_SOURCE_MIN_CONFIDENCE
        ):
            assessment = assessment.softened(handle)

        logger.info(
            "Fact-check for @%s: %s (%d%%)", handle, assessment.verdict.value, assessment.confidence,
        )
        return FactCheckResult(
            has_claim=True,
            claim_type=detection.claim_type,
            claims=detection.claims,
            assessment=assessment,
            credible_source=credible,
        )
