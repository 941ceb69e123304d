"""
podscribe.transcribe.scheduler - Bounded-concurrency chunk transcription.

Runs the single-chunk worker over every chunk with at most ``concurrency``
oracle requests in flight. Results are placed by position, never by
completion order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any

from podscribe.logging import logger
from podscribe.models import AudioChunk, ChunkTranscription
from podscribe.transcribe.oracle import build_instruction
from podscribe.transcribe.worker import error_transcription, transcribe_chunk

DEFAULT_CONCURRENCY = 3


async def transcribe_all(
    chunks: Iterable[AudioChunk],
    oracle: Any,
    concurrency: int = DEFAULT_CONCURRENCY,
    instruction: str | None = None,
    console=None,
    **worker_kwargs: Any,
) -> list[ChunkTranscription]:
    """Transcribe all chunks under a concurrency bound.

    Args:
        chunks: Chunks from the chunk producer
        oracle: Transcription oracle shared by all workers
        concurrency: Maximum simultaneous oracle requests
        instruction: Instruction text (rendered once if None)
        console: Optional rich console for output
        **worker_kwargs: Passed through to transcribe_chunk (max_retries,
            base_delay, timeout, sleep)

    Returns:
        One ChunkTranscription per chunk, ordered by chunk index

    Raises:
        ValueError: If concurrency is less than 1
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    ordered = sorted(chunks, key=lambda c: c.index)
    if not ordered:
        return []

    if instruction is None:
        instruction = build_instruction()

    semaphore = asyncio.Semaphore(concurrency)
    results: list[ChunkTranscription | None] = [None] * len(ordered)

    logger.info(
        "Transcribing %d chunks with concurrency %d", len(ordered), concurrency
    )
    if console:
        console.print(
            f"[dim]  {len(ordered)} chunk(s), up to {concurrency} in flight[/dim]"
        )

    async def run(position: int, chunk: AudioChunk) -> None:
        async with semaphore:
            try:
                result = await transcribe_chunk(
                    chunk, oracle, instruction, console=console, **worker_kwargs
                )
            except Exception as e:
                logger.exception("Unexpected error in worker for chunk %d", chunk.index)
                result = error_transcription(chunk, e)
        results[position] = result

        if console:
            if result.failed:
                console.print(f"[red]  ✗ Chunk {chunk.index}[/red]")
            else:
                console.print(
                    f"[green]  ✓ Chunk {chunk.index}[/green] "
                    f"[dim]({len(result.utterances)} utterances)[/dim]"
                )

    await asyncio.gather(*(run(i, chunk) for i, chunk in enumerate(ordered)))

    transcriptions = [r for r in results if r is not None]
    failed = sum(1 for r in transcriptions if r.failed)
    if failed:
        logger.warning(
            "%d/%d chunks produced error placeholders", failed, len(transcriptions)
        )

    return transcriptions


def transcribe_all_sync(
    chunks: Iterable[AudioChunk],
    oracle: Any,
    concurrency: int = DEFAULT_CONCURRENCY,
    **kwargs: Any,
) -> list[ChunkTranscription]:
    """Blocking wrapper around transcribe_all for synchronous callers."""
    return asyncio.run(transcribe_all(chunks, oracle, concurrency, **kwargs))
