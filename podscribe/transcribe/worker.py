"""
podscribe.transcribe.worker - Single-chunk transcription with retry.

Reads one chunk, sends it to the oracle with the fixed instruction, and
parses the response. Failures are retried with exponential backoff; once
retries are exhausted the chunk resolves to a placeholder transcription
instead of raising, so one bad chunk never aborts a batch.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from podscribe.logging import logger
from podscribe.models import AudioChunk, ChunkTranscription, TranscriptUtterance
from podscribe.timestamps import seconds_to_chunk_timestamp
from podscribe.transcribe.oracle import build_instruction, mime_type_for
from podscribe.transcribe.parsing import parse_utterances

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY = 1.0

SYSTEM_SPEAKER = "System"


def backoff_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Delay before retry number ``attempt`` (1-based): base, 2x base, 4x base..."""
    return base_delay * 2 ** (attempt - 1)


def error_transcription(chunk: AudioChunk, error: BaseException | str) -> ChunkTranscription:
    """Placeholder transcription for a chunk whose retries were exhausted."""
    return ChunkTranscription(
        chunk_index=chunk.index,
        start_time=chunk.start_time,
        end_time=chunk.end_time,
        utterances=(
            TranscriptUtterance(
                timestamp=seconds_to_chunk_timestamp(0),
                is_ad=False,
                speaker=SYSTEM_SPEAKER,
                text=f"Error transcribing chunk {chunk.index}: {error}",
                tone="Error",
            ),
        ),
        failed=True,
    )


async def _request(
    chunk: AudioChunk,
    oracle: Any,
    instruction: str,
    timeout: float | None,
) -> str:
    audio = await asyncio.to_thread(chunk.path.read_bytes)
    call = oracle.transcribe(audio, mime_type_for(chunk.path), instruction)
    if timeout is not None:
        return await asyncio.wait_for(call, timeout)
    return await call


async def transcribe_chunk(
    chunk: AudioChunk,
    oracle: Any,
    instruction: str | None = None,
    *,
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_BASE_DELAY,
    timeout: float | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    console=None,
) -> ChunkTranscription:
    """Transcribe one chunk.

    Args:
        chunk: Chunk to transcribe
        oracle: Object with ``async transcribe(audio, mime_type, instruction)``
        instruction: Instruction text (rendered from prompts/transcribe.txt if None)
        max_retries: Retries after the first attempt
        base_delay: Delay before the first retry, doubled on each further retry
        timeout: Optional per-call timeout in seconds; a timeout counts as a failure
        sleep: Awaitable sleep used between retries
        console: Optional rich console for output

    Returns:
        ChunkTranscription with chunk-relative utterances, or a single
        "System" error utterance when every attempt failed
    """
    if instruction is None:
        instruction = build_instruction()

    attempt = 0
    while True:
        try:
            raw = await _request(chunk, oracle, instruction, timeout)
            break
        except Exception as e:
            attempt += 1
            if attempt > max_retries:
                logger.error(
                    "Chunk %d failed after %d attempts: %s", chunk.index, attempt, e
                )
                if console:
                    console.print(f"[red]  Chunk {chunk.index} failed: {e}[/red]")
                return error_transcription(chunk, e)

            delay = backoff_delay(attempt, base_delay)
            logger.warning(
                "Chunk %d attempt %d/%d failed (%s), retrying in %.1fs",
                chunk.index,
                attempt,
                max_retries + 1,
                e,
                delay,
            )
            if console:
                console.print(
                    f"[yellow]  Chunk {chunk.index}: retry {attempt}/{max_retries} "
                    f"in {delay:.0f}s...[/yellow]"
                )
            await sleep(delay)

    utterances = parse_utterances(raw, chunk.index)
    logger.debug("Chunk %d transcribed with %d utterances", chunk.index, len(utterances))

    return ChunkTranscription(
        chunk_index=chunk.index,
        start_time=chunk.start_time,
        end_time=chunk.end_time,
        utterances=tuple(utterances),
    )
