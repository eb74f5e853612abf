from __future__ import annotations

import logging
import re

from debate_guard._defaults import NEUTRAL_CONFIDENCE
from debate_guard.content.base import ContentItem
from debate_guard.investigation.base import InvestigationResult
from debate_guard.llm.client import CompletionService
from debate_guard.personas.base import Persona
from debate_guard.personas.registry import PersonaRegistry
from debate_guard.utils import clamp_confidence, excerpt

logger = logging.getLogger(__name__)

_CONFIDENCE_RE = re.compile(r"CONFIDENCE:\s*(\d+)", re.IGNORECASE)


def parse_confidence(response: str | None) -> tuple[int, bool]:
    """Read the first ``CONFIDENCE: <n>`` line.

    Returns ``(confidence, found)``. Without such a line the confidence is
    neutral and ``found`` is False.
    """
    match = _CONFIDENCE_RE.search(response or "")
    if match is None:
        return NEUTRAL_CONFIDENCE, False
    return clamp_confidence(int(match.group(1))), True


def extract_confidence(response: str | None) -> int:
    return parse_confidence(response)[0]


_DEGRADED_PREFIX = f"CONFIDENCE: {NEUTRAL_CONFIDENCE}\nARGUMENT: Error in "


def degraded_response(side: str, error: BaseException | str) -> str:
    """Neutral stand-in for a turn whose upstream call failed."""
    message = str(error) or type(error).__name__
    return f"{_DEGRADED_PREFIX}{side}: {message}"


def is_degraded(response: str) -> bool:
    """True for the failure stand-in and for replies with no confidence line."""
    return response.startswith(_DEGRADED_PREFIX) or not parse_confidence(response)[1]


# ----------------------------------------------------------------------
# Prompt formatting
# ----------------------------------------------------------------------

def format_content(content: ContentItem) -> str:
    return (
        f"Type: {content.kind.value}\n"
        f'Text: "{content.text or "N/A"}"\n'
        f"Author: @{content.author_username or 'Unknown'}\n"
        f'Bio: "{content.author_bio or "N/A"}"'
    )


def format_investigation(investigation: InvestigationResult) -> str:
    lines: list[str] = []

    profile = investigation.user_profile
    if profile is not None:
        assessment = profile.assessment
        lines.extend(
            [
                "User Profile:",
                f"- Username: @{profile.username}",
                f"- Followers: {profile.metrics.followers_count}",
                f"- Account Age: {assessment.account_age_years} years",
                f"- Verified: {'YES' if profile.record.verified else 'NO'}",
                f"- Legitimacy Score: {assessment.legitimacy_score}/100",
                f"- Risk Level: {assessment.risk_level.value}",
            ]
        )
        risks = assessment.scam_risk_factors.flagged()
        if risks:
            lines.append(f"- Scam Indicators: {', '.join(risks)}")

    if investigation.user_posts:
        sample = excerpt(investigation.user_posts[0].text, 100) or "N/A"
        lines.append("")
        lines.append(f"Recent Posts: {len(investigation.user_posts)} fetched")
        lines.append(f'Sample: "{sample}..."')

    if investigation.follower_network is not None:
        lines.append(f"Network Pattern: {investigation.follower_network.pattern}")

    signals = investigation.content_signals.flagged()
    if signals:
        lines.append(f"Content Signals: {', '.join(signals)}")

    image = investigation.profile_image_analysis
    if image is not None:
        lines.append(
            f"Profile Image: stock photo={'YES' if image.is_stock_photo else 'NO'}, "
            f"AI-generated={'YES' if image.is_ai_generated else 'NO'} "
            f"({image.confidence}% confidence) - {image.explanation}"
        )

    return "\n".join(lines) if lines else "No additional evidence gathered."


def build_prosecutor_prompt(
    content: ContentItem,
    investigation: InvestigationResult,
    defender_argument: str,
    round_number: int,
) -> str:
    if defender_argument:
        rebuttal = (
            "**DEFENDER'S ARGUMENT:**\n"
            f"{defender_argument}\n\n"
            "Address the defender's points and build your case."
        )
    else:
        rebuttal = "Make your opening argument."
    return (
        f"**ROUND {round_number} - PROSECUTOR**\n\n"
        "**CONTENT UNDER REVIEW:**\n"
        f"{format_content(content)}\n\n"
        "**INVESTIGATION RESULTS:**\n"
        f"{format_investigation(investigation)}\n\n"
        f"{rebuttal}"
    )


def build_defender_prompt(
    content: ContentItem,
    investigation: InvestigationResult,
    prosecutor_argument: str,
    round_number: int,
) -> str:
    return (
        f"**ROUND {round_number} - DEFENDER**\n\n"
        "**CONTENT UNDER REVIEW:**\n"
        f"{format_content(content)}\n\n"
        "**INVESTIGATION RESULTS:**\n"
        f"{format_investigation(investigation)}\n\n"
        "**PROSECUTOR'S ARGUMENT:**\n"
        f"{prosecutor_argument}\n\n"
        "Challenge the prosecutor's claims and defend this content."
    )


# ----------------------------------------------------------------------
# Turns
# ----------------------------------------------------------------------

async def prosecutor_turn(
    completion_service: CompletionService,
    content: ContentItem,
    investigation: InvestigationResult,
    defender_argument: str,
    round_number: int,
    persona: Persona | None = None,
) -> str:
    persona = persona or PersonaRegistry.prosecutor()
    prompt = build_prosecutor_prompt(content, investigation, defender_argument, round_number)
    return await _call(completion_service, persona, prompt, "prosecution")


async def defender_turn(
    completion_service: CompletionService,
    content: ContentItem,
    investigation: InvestigationResult,
    prosecutor_argument: str,
    round_number: int,
    persona: Persona | None = None,
) -> str:
    persona = persona or PersonaRegistry.defender()
    prompt = build_defender_prompt(content, investigation, prosecutor_argument, round_number)
    return await _call(completion_service, persona, prompt, "defense")


async def _call(completion_service: CompletionService, persona: Persona, prompt: str, side: str) -> str:
    logger.debug("%s prompt:\n%s", persona.name, prompt)
    try:
        response = await completion_service.complete(prompt, persona.system_prompt)
    except Exception as exc:
        logger.warning("%s turn failed; substituting neutral response: %s", persona.name, exc)
        return degraded_response(side, exc)
    if not response:
        logger.warning("%s returned an empty response; substituting neutral response.", persona.name)
        return degraded_response(side, "empty response")
    if not parse_confidence(response)[1]:
        logger.warning("%s reply has no CONFIDENCE line; treating the turn as degraded.", persona.name)
    return response
