"""
podscribe.transcribe - Concurrent chunk transcription.

Each chunk is sent to a multimodal LLM oracle with a fixed instruction,
retried with exponential backoff, and parsed leniently. Chunks run under
a shared concurrency bound and resolve to results even on failure.
"""

from __future__ import annotations

from podscribe.transcribe.scheduler import transcribe_all, transcribe_all_sync
from podscribe.transcribe.worker import transcribe_chunk

__all__ = ["transcribe_all", "transcribe_all_sync", "transcribe_chunk"]
