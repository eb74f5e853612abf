from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


@dataclass(frozen=True, slots=True)
class Extraction:
    """Result of a best-effort structured extraction.

    ``ok`` is False when the upstream text held no usable JSON object, in
    which case ``value`` is the caller-supplied default.
    """

    value: Any
    ok: bool
    error: str | None = None


def strip_markdown_fences(content: str) -> str:
    """Remove markdown code fences (```json ... ```) wrapping a JSON payload."""
    text = content.strip()
    if text.startswith("```"):
        lines = [line for line in text.splitlines() if not line.strip().startswith("```")]
        return "\n".join(lines).strip()
    return text


def safe_json_parse(content: str) -> dict | None:
    """Parse a JSON string, returning *None* on failure instead of raising."""
    try:
        data = json.loads(content)
    except Exception:
        return None
    return data if isinstance(data, dict) else None


def extract_json_object(content: str | None, default: Any = None) -> Extraction:
    """Pull the outermost ``{...}`` block out of free-form model output.

    Models often wrap JSON in prose or code fences; everything from the first
    ``{`` to the last ``}`` is parsed.
    """
    if not content:
        return Extraction(default, False, "empty response")
    match = _JSON_OBJECT_RE.search(strip_markdown_fences(content))
    if match is None:
        return Extraction(default, False, "no JSON object found")
    data = safe_json_parse(match.group(0))
    if data is None:
        return Extraction(default, False, "invalid JSON object")
    return Extraction(data, True)


def clamp_confidence(value: float) -> int:
    """Clamp a confidence value to the valid [0, 100] integer range."""
    return max(0, min(100, int(value)))


def coerce_confidence(value: Any, default: int = 50) -> int:
    """Like :func:`clamp_confidence` but tolerant of non-numeric model output."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return clamp_confidence(number)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def excerpt(text: str | None, limit: int) -> str:
    return (text or "")[:limit]


def json_serializable(obj: object) -> object:
    """Default handler for :func:`json.dumps` that gracefully converts
    non-serializable types (enums, datetimes, sets, etc.) to JSON-safe primitives."""
    if isinstance(obj, Mapping):
        return dict(obj)
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    if hasattr(obj, "value") and not callable(obj.value):
        return obj.value
    if hasattr(obj, "tolist"):
        return obj.tolist()
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    if isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    return str(obj)
