"""
podscribe.merge - Cross-chunk merge and speaker normalization.

Converts chunk-relative timestamps to absolute ones, orders the whole
transcript, and collapses case variants of speaker labels.
"""

from __future__ import annotations

from podscribe.merge.merger import merge_transcriptions, merge_with_fallback
from podscribe.merge.speakers import normalize_speakers

__all__ = ["merge_transcriptions", "merge_with_fallback", "normalize_speakers"]
