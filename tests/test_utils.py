from __future__ import annotations

import json
from datetime import datetime, timezone
from types import MappingProxyType

from debate_guard.judges.base import Classification
from debate_guard.utils import (
    clamp_confidence,
    coerce_confidence,
    extract_json_object,
    json_serializable,
    round_half_up,
    safe_json_parse,
    strip_markdown_fences,
)


class TestStripMarkdownFences:
    def test_strip_markdown_fences_with_json_block(self) -> None:
        wrapped = '```json\n{"key": "value"}\n```'
        assert strip_markdown_fences(wrapped) == '{"key": "value"}'

    def test_strip_markdown_fences_no_fences(self) -> None:
        plain = '{"key": "value"}'
        assert strip_markdown_fences(plain) == '{"key": "value"}'


class TestSafeJsonParse:
    def test_safe_json_parse_valid(self) -> None:
        assert safe_json_parse('{"a": 1, "b": 2}') == {"a": 1, "b": 2}

    def test_safe_json_parse_invalid(self) -> None:
        assert safe_json_parse("not json at all") is None

    def test_safe_json_parse_non_dict(self) -> None:
        assert safe_json_parse("[1, 2, 3]") is None


class TestExtractJsonObject:
    def test_object_wrapped_in_prose(self) -> None:
        result = extract_json_object('Here is my plan: {"actions": []} Hope that helps.')
        assert result.ok
        assert result.value == {"actions": []}

    def test_object_inside_fences(self) -> None:
        result = extract_json_object('```json\n{"verdict": "scam"}\n```')
        assert result.ok
        assert result.value["verdict"] == "scam"

    def test_empty_response_uses_default(self) -> None:
        result = extract_json_object("", default={"fallback": True})
        assert not result.ok
        assert result.value == {"fallback": True}
        assert result.error == "empty response"

    def test_no_object(self) -> None:
        result = extract_json_object("I cannot help with that.")
        assert not result.ok
        assert result.error == "no JSON object found"

    def test_invalid_object(self) -> None:
        result = extract_json_object("{verdict: scam}")
        assert not result.ok
        assert result.error == "invalid JSON object"


class TestConfidenceHelpers:
    def test_clamp(self) -> None:
        assert clamp_confidence(150) == 100
        assert clamp_confidence(-3) == 0
        assert clamp_confidence(42.9) == 42

    def test_coerce_tolerates_garbage(self) -> None:
        assert coerce_confidence("85") == 85
        assert coerce_confidence("high") == 50
        assert coerce_confidence(None, default=0) == 0
        assert coerce_confidence(float("nan")) == 50

    def test_round_half_up(self) -> None:
        assert round_half_up(52.5) == 53
        assert round_half_up(84.5) == 85
        assert round_half_up(84.4) == 84


class TestJsonSerializable:
    def test_json_serializable_set(self) -> None:
        assert json_serializable({3, 1, 2}) == [1, 2, 3]

    def test_json_serializable_enum(self) -> None:
        assert json_serializable(Classification.SCAM) == "scam"

    def test_json_serializable_datetime(self) -> None:
        moment = datetime(2025, 1, 2, tzinfo=timezone.utc)
        assert json_serializable(moment) == "2025-01-02T00:00:00+00:00"

    def test_json_serializable_mapping_proxy(self) -> None:
        assert json_serializable(MappingProxyType({"a": 1})) == {"a": 1}

    def test_json_serializable_fallback(self) -> None:
        class Custom:
            def __str__(self):
                return "custom-repr"

        assert json_serializable(Custom()) == "custom-repr"

    def test_json_serializable_roundtrip(self) -> None:
        data = {"items": {3, 1, 2}, "label": Classification.LEGITIMATE}
        parsed = json.loads(json.dumps(data, default=json_serializable))
        assert parsed == {"items": [1, 2, 3], "label": "legitimate"}
