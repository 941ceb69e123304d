"""
podscribe.merge.merger - Merge per-chunk transcriptions.

Converts chunk-relative utterance timestamps to absolute ones and
produces one globally time-ordered segment list.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from podscribe.exceptions import MergeError, TimestampFormatError
from podscribe.logging import logger
from podscribe.models import ChunkTranscription, TranscriptSegment
from podscribe.timestamps import seconds_to_timestamp, timestamp_to_seconds


def count_utterances(chunks: Sequence[ChunkTranscription]) -> int:
    """Total number of utterances across all chunk transcriptions."""
    return sum(len(c.utterances) for c in chunks)


def _sorted_chunks(chunks: Sequence[ChunkTranscription]) -> list[ChunkTranscription]:
    ordered = sorted(chunks, key=lambda c: c.chunk_index)
    seen: set[int] = set()
    for chunk in ordered:
        if chunk.chunk_index in seen:
            raise MergeError(f"Duplicate chunk index {chunk.chunk_index}")
        seen.add(chunk.chunk_index)
    return ordered


def merge_transcriptions(chunks: Sequence[ChunkTranscription]) -> list[TranscriptSegment]:
    """Merge chunk transcriptions into absolute-timestamped segments.

    Args:
        chunks: Chunk transcriptions in any order

    Returns:
        Segments sorted by absolute time; ties keep chunk order, then
        within-chunk order

    Raises:
        TimestampFormatError: If an utterance timestamp is not MM:SS or HH:MM:SS
        MergeError: If two transcriptions share a chunk index
    """
    timed: list[tuple[float, TranscriptSegment]] = []

    for chunk in _sorted_chunks(chunks):
        # whole-second display never precedes the chunk start
        earliest = math.ceil(chunk.start_time)
        for utterance in chunk.utterances:
            absolute = chunk.start_time + timestamp_to_seconds(utterance.timestamp)
            display = seconds_to_timestamp(max(absolute, earliest))
            segment = TranscriptSegment.from_utterance(utterance, display)
            timed.append((absolute, segment))

    # list.sort is stable, so equal times keep (chunk, position) order
    timed.sort(key=lambda pair: pair[0])
    merged = [segment for _, segment in timed]

    logger.info("Merged %d chunks into %d segments", len(chunks), len(merged))
    return merged


def concatenate_transcriptions(chunks: Sequence[ChunkTranscription]) -> list[TranscriptSegment]:
    """Flat chunk-ordered concatenation with timestamps left as returned."""
    ordered = sorted(chunks, key=lambda c: c.chunk_index)
    return [
        TranscriptSegment.from_utterance(u, u.timestamp) for chunk in ordered for u in chunk.utterances
    ]


def merge_with_fallback(
    chunks: Sequence[ChunkTranscription],
    console=None,
) -> tuple[list[TranscriptSegment], bool]:
    """Merge, degrading to flat concatenation on a structural error.

    Args:
        chunks: Chunk transcriptions
        console: Optional rich console for output

    Returns:
        Tuple of (segments, degraded). ``degraded`` is True when the
        fallback was used and timestamps are not absolute.
    """
    try:
        return merge_transcriptions(chunks), False
    except (MergeError, TimestampFormatError) as e:
        logger.warning(
            "Merge failed (%s); using quality-reducing fallback without offset adjustment", e
        )
        if console:
            console.print(
                f"[yellow]Warning: merge failed ({e}); timestamps are chunk-relative[/yellow]"
            )
        return concatenate_transcriptions(chunks), True
