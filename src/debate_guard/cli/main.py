from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from debate_guard._defaults import (
    DEFAULT_CONVERGENCE_THRESHOLD,
    DEFAULT_FAST_MODEL,
    DEFAULT_MAX_ROUNDS,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT_S,
)
from debate_guard.classifiers.instant import InstantClassifier
from debate_guard.content.base import ContentItem, ContentKind
from debate_guard.content.credibility import CredibleSourceFilter
from debate_guard.debate.base import DebateResult
from debate_guard.debate.engine import DebateConfig, DebateOrchestrator
from debate_guard.factcheck.checker import FactChecker
from debate_guard.guard.core import DEFAULT_SCAN_CONCURRENCY, FeedPost, Guard
from debate_guard.investigation.investigator import Investigator
from debate_guard.llm.client import CompletionService, LiteLLMCompletionService
from debate_guard.profiles.base import ProfileDataService
from debate_guard.profiles.x_api import NullProfileService, XApiProfileService
from debate_guard.utils import json_serializable

app = typer.Typer(name="debate-guard", help="Adversarial LLM debate for social-media scam moderation.")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_jsonl(path: Path) -> list[dict]:
    rows: list[dict] = []
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            if line.strip():
                rows.append(json.loads(line))
    return rows


def _write_jsonl(path: Path, rows: list[dict]) -> None:
    with path.open("w", encoding="utf-8") as fh:
        for row in rows:
            fh.write(json.dumps(row, default=json_serializable, ensure_ascii=True) + "\n")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_profile_service(offline: bool) -> ProfileDataService:
    if offline:
        return NullProfileService()
    return XApiProfileService()


def _build_completion_service(model: str, timeout: float) -> CompletionService:
    return LiteLLMCompletionService(model=model, timeout_s=timeout)


def _build_fast_completion_service(model: str, timeout: float, max_tokens: int = 100) -> CompletionService:
    return LiteLLMCompletionService(model=model, temperature=0.1, max_tokens=max_tokens, timeout_s=timeout)


async def _debate_and_close(
    orchestrator: DebateOrchestrator,
    profiles: ProfileDataService,
    content: ContentItem,
) -> DebateResult:
    try:
        return await orchestrator.run_debate(content)
    finally:
        aclose = getattr(profiles, "aclose", None)
        if aclose is not None:
            await aclose()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def debate(
    username: str = typer.Option(..., help="Author username, with or without @"),
    text: Optional[str] = typer.Option(None, help="Content text; omit to review the profile itself"),
    kind: ContentKind = typer.Option(ContentKind.PROFILE, help="Content kind: post, profile, dm"),
    bio: Optional[str] = typer.Option(None, help="Author bio, if known"),
    model: str = typer.Option(DEFAULT_MODEL, help="Model used for planning and persona turns"),
    max_rounds: int = typer.Option(DEFAULT_MAX_ROUNDS, help="Maximum debate rounds"),
    convergence_threshold: int = typer.Option(
        DEFAULT_CONVERGENCE_THRESHOLD, help="Stop once confidences are within this many points",
    ),
    timeout: float = typer.Option(DEFAULT_TIMEOUT_S, help="Per-call upstream timeout in seconds"),
    offline: bool = typer.Option(False, help="Skip the X API and debate on the content alone"),
    analyze_image: Optional[str] = typer.Option(None, help="Profile image URL to analyze"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Run a full prosecutor/defender debate and print the result as JSON."""
    _configure_logging(log_level)
    completion = _build_completion_service(model, timeout)
    profiles = _build_profile_service(offline)
    investigator = Investigator(
        completion,
        profiles,
        analyze_profile_image=analyze_image is not None,
    )
    orchestrator = DebateOrchestrator(
        completion,
        investigator,
        config=DebateConfig(max_rounds=max_rounds, convergence_threshold=convergence_threshold),
    )
    handle = username.lstrip("@")
    content = ContentItem(
        id=f"cli_{kind.value}_{handle}",
        kind=kind,
        text=text or "",
        author_username=handle,
        author_bio=bio,
        author_profile_image=analyze_image,
    )
    result = asyncio.run(_debate_and_close(orchestrator, profiles, content))
    typer.echo(result.to_json())


@app.command()
def scan(
    input: Path = typer.Option(..., help="Input JSONL file with username and text fields"),
    output: Path = typer.Option(..., help="Output JSONL file"),
    model: str = typer.Option(DEFAULT_FAST_MODEL, help="Model for instant classification"),
    concurrency: int = typer.Option(DEFAULT_SCAN_CONCURRENCY, help="Maximum posts in flight"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT_S, help="Per-post timeout in seconds"),
    skip_credible: bool = typer.Option(True, help="Skip posts from known credible sources"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Instant-classify JSONL posts for feed scanning."""
    _configure_logging(log_level)
    rows = _load_jsonl(input)
    missing = [idx for idx, row in enumerate(rows, start=1) if "username" not in row or "text" not in row]
    if missing:
        raise typer.BadParameter(
            f"Rows {missing[:5]} are missing a 'username' or 'text' field.", param_hint="--input",
        )
    posts = [
        FeedPost(
            username=str(row.get("username", "")),
            text=str(row.get("text", "")),
            verified=bool(row.get("verified", False)),
            url=row.get("url"),
        )
        for row in rows
    ]

    completion = _build_fast_completion_service(model, timeout)
    guard = Guard(
        orchestrator=DebateOrchestrator(completion, Investigator(completion, NullProfileService())),
        instant_classifier=InstantClassifier(completion),
        credibility_filter=CredibleSourceFilter() if skip_credible else None,
    )
    verdicts = asyncio.run(guard.scan_feed(posts, concurrency=concurrency, timeout_s=timeout))

    out_rows = []
    for post, verdict in zip(posts, verdicts):
        row: dict = {"username": post.username, "text": post.text}
        if verdict is None:
            row["verdict"] = None
        else:
            row["verdict"] = verdict.to_dict()
        out_rows.append(row)
    _write_jsonl(output, out_rows)
    stats = guard.stats
    typer.echo(
        f"Wrote {len(out_rows)} verdict(s) to {output} "
        f"({stats.scams} scam, {stats.suspicious} flagged, {stats.skipped_credible} skipped, "
        f"{stats.failures} failed)"
    )


@app.command("fact-check")
def fact_check(
    username: str = typer.Option(..., help="Author username, with or without @"),
    text: str = typer.Option(..., help="Post text to check for verifiable claims"),
    verified: bool = typer.Option(False, help="Author is platform-verified"),
    model: str = typer.Option(DEFAULT_MODEL, help="Model used to judge the main claim"),
    detection_model: str = typer.Option(DEFAULT_FAST_MODEL, help="Model used to detect claims"),
    timeout: float = typer.Option(DEFAULT_TIMEOUT_S, help="Per-call upstream timeout in seconds"),
    log_level: str = typer.Option("WARNING", help="Logging level"),
) -> None:
    """Detect factual claims in a post and fact-check the main one."""
    _configure_logging(log_level)
    checker = FactChecker(
        _build_completion_service(model, timeout),
        detection_service=_build_fast_completion_service(detection_model, timeout, max_tokens=200),
        credibility_filter=CredibleSourceFilter(),
    )
    result = asyncio.run(checker.fact_check(username, text, verified=verified))
    typer.echo(result.to_json())


def main(argv: list[str] | None = None) -> None:
    if argv is not None:
        app(standalone_mode=False, args=argv)
    else:
        app()


if __name__ == "__main__":
    main()
