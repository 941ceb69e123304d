"""
podscribe.llm.highlights - Highlights, topics, and summary.

LLM passes over the merged transcript, each with a non-LLM fallback so a
failed call never loses the transcript itself.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence
from typing import Any

from podscribe.logging import logger
from podscribe.models import TranscriptSegment

SUMMARY_FALLBACK = "Summary generation failed. Please review the transcript for details."

EMOTIONAL_TONES = {"excited", "angry", "sad", "surprised"}

STOP_WORDS = frozenset(
    """
    the a an and or but in on at to for is are was were been be have has had
    do does did will would could should may might can this that these those
    i you he she it we they what which who when where why how
    """.split()
)


def extract_highlights(
    segments: Sequence[TranscriptSegment],
    client: Any,
    template_manager: Any,
    min_highlights: int = 5,
    max_highlights: int = 10,
    console=None,
) -> list[str]:
    """Ask the LLM for key highlights, falling back to heuristics on failure.

    Args:
        segments: Final transcript segments
        client: LLMClient instance
        template_manager: PromptTemplateManager instance
        min_highlights: Lower bound requested in the prompt
        max_highlights: Upper bound requested in the prompt
        console: Optional rich console for output

    Returns:
        Highlight sentences
    """
    from podscribe.exceptions import LLMResponseError
    from podscribe.llm.parsing import parse_llm_json_array, validate_highlights_response
    from podscribe.llm.templates import format_transcript_for_prompt

    prompt = template_manager.render(
        "highlights.txt",
        {
            "TRANSCRIPT": format_transcript_for_prompt(segments),
            "MIN_HIGHLIGHTS": min_highlights,
            "MAX_HIGHLIGHTS": max_highlights,
        },
    )

    try:
        response = client.complete(prompt, max_tokens=2048, temperature=0.5, console=console)
        highlights = validate_highlights_response(parse_llm_json_array(response))
        if not highlights:
            raise LLMResponseError("No highlights in LLM response")
        return highlights
    except Exception as e:
        logger.warning("Failed to extract highlights (%s), using fallback", e)
        if console:
            console.print("[yellow]  Highlight extraction failed, using fallback[/yellow]")
        return extract_basic_highlights(segments)


def generate_summary(
    segments: Sequence[TranscriptSegment],
    client: Any,
    template_manager: Any,
    console=None,
) -> str:
    """Ask the LLM for a narrative summary.

    Returns:
        Summary text, or SUMMARY_FALLBACK if the call fails
    """
    from podscribe.llm.templates import format_transcript_for_prompt

    prompt = template_manager.render(
        "summary.txt",
        {"TRANSCRIPT": format_transcript_for_prompt(segments, with_speakers=True)},
    )

    try:
        summary = client.complete(prompt, max_tokens=2048, temperature=0.5, console=console)
    except Exception as e:
        logger.warning("Failed to generate summary: %s", e)
        return SUMMARY_FALLBACK

    return summary.strip() or SUMMARY_FALLBACK


def extract_basic_highlights(segments: Sequence[TranscriptSegment]) -> list[str]:
    """Heuristic highlights: an emotional moment, long segments, a question."""
    highlights: list[str] = []

    emotional = [s for s in segments if s.tone and s.tone.lower() in EMOTIONAL_TONES]
    if emotional:
        highlights.append(f"Emotional moment: {emotional[0].text[:100]}...")

    longest = sorted(segments, key=lambda s: len(s.text), reverse=True)
    for seg in longest[:3]:
        if len(seg.text) > 50:
            highlights.append(f"Key topic discussed: {seg.text[:80]}...")

    questions = [s for s in segments if "?" in s.text]
    if questions:
        highlights.append(f"Question raised: {questions[0].text[:80]}...")

    return highlights[:5]


def analyze_topics(segments: Sequence[TranscriptSegment], limit: int = 10) -> list[str]:
    """Most frequent content words (longer than three letters, not stop words)."""
    counts: Counter[str] = Counter()
    for seg in segments:
        for word in seg.text.lower().split():
            cleaned = re.sub(r"[^a-z0-9]", "", word)
            if len(cleaned) > 3 and cleaned not in STOP_WORDS:
                counts[cleaned] += 1
    return [word for word, _ in counts.most_common(limit)]
