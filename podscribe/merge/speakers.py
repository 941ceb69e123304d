"""
podscribe.merge.speakers - Speaker label canonicalization.

The oracle labels speakers independently per chunk, so one label can be
spelled differently across chunks. This pass collapses case variants of
the same label ("host" vs "Host") onto the most frequent spelling.

It is lexical only. Distinct labels for one person ("Speaker A" vs
"Jane Doe") stay distinct, and one label used by two different people in
far-apart chunks stays merged. Resolving either needs voice embeddings.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from podscribe.models import TranscriptSegment

UNKNOWN_SPEAKER = "Unknown"


def _clean(label: str) -> str:
    return label.strip() or UNKNOWN_SPEAKER


def speaker_mapping(segments: Sequence[TranscriptSegment]) -> dict[str, str]:
    """Build the label -> canonical label table.

    Labels are visited in descending frequency, ties in order of first
    appearance. A label whose casefolded form matches an already accepted
    canonical label maps onto it; otherwise it becomes canonical itself.

    Returns:
        Mapping keyed by the raw label as it appears on segments
    """
    cleaned = [_clean(seg.speaker) for seg in segments]
    counts = Counter(cleaned)
    first_seen = {label: i for i, label in reversed(list(enumerate(cleaned)))}

    ranked = sorted(counts, key=lambda label: (-counts[label], first_seen[label]))

    canonical_by_key: dict[str, str] = {}
    clean_mapping: dict[str, str] = {}
    for label in ranked:
        key = label.casefold()
        canonical = canonical_by_key.setdefault(key, label)
        clean_mapping[label] = canonical

    return {seg.speaker: clean_mapping[_clean(seg.speaker)] for seg in segments}


def normalize_speakers(segments: Sequence[TranscriptSegment]) -> list[TranscriptSegment]:
    """Rewrite speaker labels to their canonical form.

    Pure: returns new segment objects in the same order; only ``speaker``
    differs from the input.
    """
    mapping = speaker_mapping(segments)
    return [seg.model_copy(update={"speaker": mapping[seg.speaker]}) for seg in segments]


def unique_speakers(segments: Sequence[TranscriptSegment]) -> list[str]:
    """Distinct speaker labels in order of first appearance."""
    return list(dict.fromkeys(seg.speaker for seg in segments))
