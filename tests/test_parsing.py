"""Tests for JSON array recovery and utterance parsing."""

from __future__ import annotations

import json

import pytest

from podscribe.exceptions import LLMResponseError
from podscribe.llm.parsing import (
    extract_json_array,
    parse_llm_json_array,
    repair_json,
    strip_code_fences,
    validate_highlights_response,
)
from podscribe.transcribe.parsing import coerce_utterance, fallback_utterance, parse_utterances


class TestParseLLMJsonArray:
    def test_clean_array(self) -> None:
        assert parse_llm_json_array('[{"a": 1}, {"b": 2}]') == [{"a": 1}, {"b": 2}]

    def test_json_fenced(self) -> None:
        response = '```json\n[{"a": 1}]\n```'
        assert parse_llm_json_array(response) == [{"a": 1}]

    def test_plain_fenced(self) -> None:
        response = '```\n["one", "two"]\n```'
        assert parse_llm_json_array(response) == ["one", "two"]

    def test_surrounding_prose(self) -> None:
        response = 'Here is the transcript:\n[{"a": 1}]\nLet me know if you need more.'
        assert parse_llm_json_array(response) == [{"a": 1}]

    def test_stray_bracket_before_payload(self) -> None:
        response = 'Note [see below] for details: [{"a": 1}]'
        assert parse_llm_json_array(response) == [{"a": 1}]

    def test_accept_skips_rejected_arrays(self) -> None:
        response = 'Pick [1] or [{"a": 1}]'
        assert parse_llm_json_array(response) == [1]
        has_object = lambda items: any(isinstance(i, dict) for i in items)  # noqa: E731
        assert parse_llm_json_array(response, accept=has_object) == [{"a": 1}]

    def test_accept_rejecting_everything_raises(self) -> None:
        with pytest.raises(LLMResponseError):
            parse_llm_json_array("[1, 2]", accept=lambda items: False)

    def test_trailing_comma(self) -> None:
        assert parse_llm_json_array('[{"a": 1}, {"b": 2},]') == [{"a": 1}, {"b": 2}]

    def test_truncated_array(self) -> None:
        assert parse_llm_json_array('[{"a": 1}, {"b": 2}') == [{"a": 1}, {"b": 2}]

    def test_empty_array(self) -> None:
        assert parse_llm_json_array("[]") == []

    def test_prose_only_raises(self) -> None:
        with pytest.raises(LLMResponseError, match="Failed to parse"):
            parse_llm_json_array("I could not hear anything in this audio.")

    def test_object_not_array_raises(self) -> None:
        with pytest.raises(LLMResponseError):
            parse_llm_json_array('{"text": "hello"}')


class TestHelpers:
    def test_strip_code_fences_no_fence(self) -> None:
        assert strip_code_fences("  [1]  ") == "[1]"

    def test_extract_json_array_none(self) -> None:
        assert extract_json_array("no brackets here") is None

    def test_repair_json_closes_and_trims(self) -> None:
        assert json.loads(repair_json('[{"a": 1},')) == [{"a": 1}]

    def test_validate_highlights_filters(self) -> None:
        data = [" First ", "", 3, None, "Second"]
        assert validate_highlights_response(data) == ["First", "Second"]


class TestCoerceUtterance:
    def test_full_record(self) -> None:
        u = coerce_utterance(
            {"timestamp": "01:05", "ad": True, "speaker": "Host", "text": " Hi ", "tone": "warm"}
        )
        assert u.timestamp == "01:05"
        assert u.is_ad is True
        assert u.speaker == "Host"
        assert u.text == "Hi"
        assert u.tone == "warm"

    def test_missing_fields_default(self) -> None:
        u = coerce_utterance({})
        assert u.timestamp == "00:00"
        assert u.is_ad is False
        assert u.speaker == "Unknown"
        assert u.text == ""
        assert u.tone == "Neutral"

    def test_invalid_timestamp_defaults(self) -> None:
        assert coerce_utterance({"timestamp": "about a minute in"}).timestamp == "00:00"
        assert coerce_utterance({"timestamp": 65}).timestamp == "00:00"

    def test_ad_string_values(self) -> None:
        assert coerce_utterance({"ad": "true"}).is_ad is True
        assert coerce_utterance({"ad": "no"}).is_ad is False

    def test_is_ad_alternate_key(self) -> None:
        assert coerce_utterance({"isAd": True}).is_ad is True

    def test_blank_speaker_defaults(self) -> None:
        assert coerce_utterance({"speaker": "   "}).speaker == "Unknown"


class TestParseUtterances:
    def test_array_in_prose(self) -> None:
        raw = (
            "Sure! Here you go:\n```json\n"
            '[{"timestamp": "00:05", "ad": false, "speaker": "Host", '
            '"text": "Welcome", "tone": "calm"}]\n```'
        )
        utterances = parse_utterances(raw, 0)
        assert len(utterances) == 1
        assert utterances[0].speaker == "Host"
        assert utterances[0].timestamp == "00:05"

    def test_preserves_order(self) -> None:
        raw = json.dumps(
            [
                {"timestamp": "00:10", "text": "second-by-time"},
                {"timestamp": "00:02", "text": "first-by-time"},
            ]
        )
        texts = [u.text for u in parse_utterances(raw)]
        assert texts == ["second-by-time", "first-by-time"]

    def test_empty_array_is_empty(self) -> None:
        assert parse_utterances("[]") == []

    def test_stray_array_before_payload(self) -> None:
        raw = (
            "Speakers [1, 2] below:\n"
            '[{"timestamp": "00:05", "speaker": "Host", "text": "hello"}]'
        )
        utterances = parse_utterances(raw, 0)
        assert [u.text for u in utterances] == ["hello"]
        assert utterances[0].speaker == "Host"

    def test_stray_array_before_truncated_payload(self) -> None:
        raw = 'See [a, b]? ok [1] then:\n[{"timestamp": "00:05", "text": "cut"},'
        assert [u.text for u in parse_utterances(raw)] == ["cut"]

    def test_array_without_objects_falls_back(self) -> None:
        raw = "The chapters are [1, 2, 3] and nothing else."
        utterances = parse_utterances(raw)
        assert len(utterances) == 1
        assert utterances[0].text == raw

    def test_fenced_empty_array_is_empty(self) -> None:
        assert parse_utterances("```json\n[]\n```") == []

    def test_non_object_elements_become_defaults(self) -> None:
        raw = '["stray", {"text": "kept"}, 42]'
        utterances = parse_utterances(raw)
        assert [u.text for u in utterances] == ["stray", "kept", ""]
        assert {u.speaker for u in utterances} == {"Unknown"}
        assert utterances[2].timestamp == "00:00"

    def test_prose_falls_back_to_raw_text(self) -> None:
        raw = "  The speaker talks about the weather.  "
        utterances = parse_utterances(raw, 2)
        assert len(utterances) == 1
        fallback = utterances[0]
        assert fallback.text == raw.strip()
        assert fallback.speaker == "Unknown"
        assert fallback.timestamp == "00:00"
        assert fallback.is_ad is False

    def test_fallback_utterance_tone(self) -> None:
        assert fallback_utterance("x").tone == "Unknown"
