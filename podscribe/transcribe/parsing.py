"""
podscribe.transcribe.parsing - Oracle response to utterance records.

The oracle is asked for a bare JSON array but routinely wraps it in prose
or code fences, or returns prose alone. Parsing is layered: recover an
array if at all possible, coerce each element field by field, and fall
back to a single synthetic utterance holding the raw text.
"""

from __future__ import annotations

from typing import Any

from podscribe.exceptions import LLMResponseError
from podscribe.llm.parsing import parse_llm_json_array, parse_strict_array, strip_code_fences
from podscribe.logging import logger
from podscribe.models import TranscriptUtterance
from podscribe.timestamps import is_valid_timestamp, seconds_to_chunk_timestamp

DEFAULT_TIMESTAMP = seconds_to_chunk_timestamp(0)
DEFAULT_SPEAKER = "Unknown"
DEFAULT_TONE = "Neutral"

_TRUTHY = {"true", "yes", "1"}


def _coerce_str(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False


def coerce_utterance(item: Any) -> TranscriptUtterance:
    """Build an utterance from one array element, defaulting bad fields.

    A bare string element becomes the utterance text; any other non-object
    element yields an all-default utterance.
    """
    if not isinstance(item, dict):
        item = {"text": item} if isinstance(item, str) else {}

    timestamp = item.get("timestamp")
    if isinstance(timestamp, str) and is_valid_timestamp(timestamp):
        timestamp = timestamp.strip()
    else:
        timestamp = DEFAULT_TIMESTAMP

    text = item.get("text")
    is_ad = item["ad"] if "ad" in item else item.get("isAd", False)

    return TranscriptUtterance(
        timestamp=timestamp,
        is_ad=_coerce_bool(is_ad),
        speaker=_coerce_str(item.get("speaker"), DEFAULT_SPEAKER),
        text=text.strip() if isinstance(text, str) else "",
        tone=_coerce_str(item.get("tone"), DEFAULT_TONE),
    )


def fallback_utterance(raw: str) -> TranscriptUtterance:
    """Single utterance spanning the whole chunk, carrying the raw response."""
    return TranscriptUtterance(
        timestamp=DEFAULT_TIMESTAMP,
        is_ad=False,
        speaker=DEFAULT_SPEAKER,
        text=raw.strip(),
        tone="Unknown",
    )


def has_utterance_objects(items: list[Any]) -> bool:
    """True if the array holds at least one object element."""
    return any(isinstance(item, dict) for item in items)


def parse_utterances(raw: str, chunk_index: int | None = None) -> list[TranscriptUtterance]:
    """Parse an oracle response into utterances.

    Arrays without any object element (a bracketed aside in prose, say)
    are skipped in favor of a later array that has one.

    Args:
        raw: Raw oracle response text
        chunk_index: Chunk index, used only for log messages

    Returns:
        Utterances in response order. A response that is exactly an empty
        array yields an empty list; anything unparseable yields one
        fallback utterance.
    """
    if parse_strict_array(strip_code_fences(raw)) == []:
        return []

    try:
        items = parse_llm_json_array(raw, accept=has_utterance_objects)
    except LLMResponseError:
        logger.warning(
            "Failed to parse JSON response for chunk %s, using fallback", chunk_index
        )
        return [fallback_utterance(raw)]

    return [coerce_utterance(item) for item in items]
