"""Tests for podscribe.llm.highlights - highlights, summary, topics."""

from __future__ import annotations

from unittest.mock import MagicMock

from podscribe.exceptions import LLMError
from podscribe.llm.highlights import (
    SUMMARY_FALLBACK,
    analyze_topics,
    extract_basic_highlights,
    extract_highlights,
    generate_summary,
)
from podscribe.llm.templates import PromptTemplateManager
from podscribe.models import TranscriptSegment


def _make_mock_client(response: str | None = None, error: Exception | None = None) -> MagicMock:
    """Create a mock LLM client returning ``response`` or raising ``error``."""
    client = MagicMock()
    if error is not None:
        client.complete.side_effect = error
    else:
        client.complete.return_value = response
    return client


class TestExtractHighlights:
    def test_parses_llm_array(self, sample_segments) -> None:
        client = _make_mock_client('```json\n["Rivers matter", "Sponsor read"]\n```')

        highlights = extract_highlights(sample_segments, client, PromptTemplateManager())

        assert highlights == ["Rivers matter", "Sponsor read"]
        prompt = client.complete.call_args.args[0]
        assert "Rivers shaped my whole childhood." in prompt

    def test_llm_error_uses_fallback(self, sample_segments) -> None:
        client = _make_mock_client(error=LLMError("down"))

        highlights = extract_highlights(sample_segments, client, PromptTemplateManager())

        assert highlights == extract_basic_highlights(sample_segments)
        assert highlights

    def test_unparseable_uses_fallback(self, sample_segments) -> None:
        client = _make_mock_client("Here are some thoughts, no list.")

        highlights = extract_highlights(sample_segments, client, PromptTemplateManager())

        assert highlights == extract_basic_highlights(sample_segments)

    def test_empty_array_uses_fallback(self, sample_segments) -> None:
        client = _make_mock_client("[]")

        highlights = extract_highlights(sample_segments, client, PromptTemplateManager())

        assert highlights == extract_basic_highlights(sample_segments)


class TestGenerateSummary:
    def test_returns_stripped_summary(self, sample_segments) -> None:
        client = _make_mock_client("  A show about rivers.  ")

        summary = generate_summary(sample_segments, client, PromptTemplateManager())

        assert summary == "A show about rivers."
        assert "[Guest]: Why do rivers matter" in client.complete.call_args.args[0]

    def test_error_returns_fallback(self, sample_segments) -> None:
        client = _make_mock_client(error=LLMError("down"))
        assert generate_summary(sample_segments, client, PromptTemplateManager()) == SUMMARY_FALLBACK

    def test_blank_returns_fallback(self, sample_segments) -> None:
        client = _make_mock_client("   ")
        assert generate_summary(sample_segments, client, PromptTemplateManager()) == SUMMARY_FALLBACK


class TestExtractBasicHighlights:
    def test_categories(self, sample_segments) -> None:
        highlights = extract_basic_highlights(sample_segments)

        assert highlights[0].startswith("Emotional moment: Why do rivers matter")
        assert any(h.startswith("Key topic discussed: Welcome back") for h in highlights)
        assert highlights[-1].startswith("Question raised: Why do rivers")

    def test_at_most_five(self) -> None:
        long_text = "word " * 30
        segments = [
            TranscriptSegment(text=f"{long_text}?", tone="excited") for _ in range(10)
        ]
        assert len(extract_basic_highlights(segments)) == 5

    def test_empty(self) -> None:
        assert extract_basic_highlights([]) == []


class TestAnalyzeTopics:
    def test_most_frequent_words(self, sample_segments) -> None:
        topics = analyze_topics(sample_segments)
        assert topics[0] == "rivers"
        assert "the" not in topics
        assert all(len(t) > 3 for t in topics)

    def test_limit(self, sample_segments) -> None:
        assert len(analyze_topics(sample_segments, limit=2)) == 2

    def test_stop_words_removed(self) -> None:
        segments = [TranscriptSegment(text="would could should would could water")]
        assert analyze_topics(segments) == ["water"]
