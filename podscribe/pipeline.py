"""
podscribe.pipeline - End-to-end processing.

Acquisition → downsampling → chunking → concurrent chunk transcription →
merge → speaker normalization → highlights/topics/summary → output files.
Chunk transcription is the only concurrent stage; merge and normalization
start after every chunk has resolved.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from podscribe.config import PodscribeConfig
from podscribe.exceptions import AcquisitionError, TranscriptionError
from podscribe.logging import logger
from podscribe.models import ChunkTranscription, FinalOutput, TranscriptSegment
from podscribe.utils import format_duration, generate_output_filename, run_folder_name


class TranscriptResult(BaseModel):
    """Everything the transcription core produced for one audio file."""

    chunk_transcriptions: list[ChunkTranscription]
    merged: list[TranscriptSegment]
    segments: list[TranscriptSegment]
    speaker_mapping: dict[str, str]
    degraded_merge: bool = False

    @property
    def failed_chunks(self) -> list[int]:
        return [c.chunk_index for c in self.chunk_transcriptions if c.failed]


class ProcessResult(BaseModel):
    """Outcome of a full processing run."""

    output: FinalOutput
    files: dict[str, Path] = Field(default_factory=dict)
    chunk_count: int = 0
    failed_chunks: list[int] = Field(default_factory=list)
    degraded_merge: bool = False


def has_usable_utterances(transcriptions: Sequence[ChunkTranscription]) -> bool:
    """True if at least one chunk returned a real (non-placeholder) utterance."""
    return any(not c.failed and c.utterances for c in transcriptions)


def transcribe_chunks(
    chunks: Sequence[Any],
    oracle: Any,
    config: PodscribeConfig,
    console=None,
) -> TranscriptResult:
    """Run the transcription core over prepared chunks.

    Args:
        chunks: AudioChunk list from the chunk producer
        oracle: Transcription oracle
        config: Resolved configuration (concurrency, retries, timeout)
        console: Optional rich console for output

    Returns:
        TranscriptResult with raw, merged, and normalized data

    Raises:
        TranscriptionError: If no chunk produced a usable utterance
    """
    from podscribe.merge.merger import count_utterances, merge_with_fallback
    from podscribe.merge.speakers import normalize_speakers, speaker_mapping
    from podscribe.transcribe.scheduler import transcribe_all_sync

    transcriptions = transcribe_all_sync(
        chunks,
        oracle,
        concurrency=config.concurrency,
        console=console,
        max_retries=config.max_retries,
        base_delay=config.retry_base_delay,
        timeout=config.request_timeout,
    )

    if not has_usable_utterances(transcriptions):
        raise TranscriptionError("No chunk produced a usable transcript")

    merged, degraded = merge_with_fallback(transcriptions, console=console)
    expected = count_utterances(transcriptions)
    if len(merged) != expected:
        logger.warning("Merge produced %d segments from %d utterances", len(merged), expected)

    mapping = speaker_mapping(merged)
    segments = normalize_speakers(merged)

    return TranscriptResult(
        chunk_transcriptions=transcriptions,
        merged=merged,
        segments=segments,
        speaker_mapping=mapping,
        degraded_merge=degraded,
    )


def summarize(
    segments: Sequence[TranscriptSegment],
    client: Any,
    template_manager: Any,
    console=None,
) -> tuple[list[str], list[str], str]:
    """Highlights, topics, and summary for the final transcript."""
    from podscribe.llm.highlights import analyze_topics, extract_highlights, generate_summary

    highlights = extract_highlights(segments, client, template_manager, console=console)
    topics = analyze_topics(segments)
    summary = generate_summary(segments, client, template_manager, console=console)
    return highlights, topics, summary


def write_outputs(
    output: FinalOutput,
    result: TranscriptResult,
    json_path: Path,
    config: PodscribeConfig,
) -> dict[str, Path]:
    """Write JSON, text, report, and sidecar files according to config."""
    from podscribe.reports.output import (
        save_debug_sidecar,
        save_metadata_report,
        save_output_json,
        save_transcript_text,
    )

    files = {"json": save_output_json(output, json_path)}
    base = json_path.with_suffix("")

    if config.write_text:
        files["text"] = save_transcript_text(output.full_transcript, base.with_suffix(".txt"))
    if config.write_report:
        files["report"] = save_metadata_report(
            output, base.parent / f"{base.name}_report.txt"
        )
    if config.debug_sidecar:
        files["debug"] = save_debug_sidecar(
            base.parent / f"{base.name}_debug.json",
            result.chunk_transcriptions,
            result.merged,
            result.speaker_mapping,
            degraded_merge=result.degraded_merge,
        )
    return files


def process_audio(
    source: str,
    config: PodscribeConfig,
    output_name: str | None = None,
    title: str | None = None,
    oracle: Any = None,
    text_client: Any = None,
    console=None,
) -> ProcessResult:
    """Process a URL or local audio file end to end.

    Args:
        source: http(s) URL or path to a local audio file
        config: Resolved configuration
        output_name: Output JSON filename (generated from source if None)
        title: Title override (fetched from metadata for URLs if None)
        oracle: Transcription oracle (LLM-backed from config if None)
        text_client: LLMClient for highlights/summary (from config if None)
        console: Optional rich console for output

    Returns:
        ProcessResult with the final output and written file paths

    Raises:
        AcquisitionError: If the source cannot be downloaded or found
        ExtractionError: If audio conversion or chunking fails
        TranscriptionError: If no chunk produced a usable transcript
    """
    from podscribe.extract.audio import cleanup_chunks, downsample_audio, split_audio
    from podscribe.extract.download import (
        download_audio,
        get_media_info,
        is_remote_url,
        is_spotify_url,
    )
    from podscribe.llm.client import create_client_from_config
    from podscribe.llm.templates import PromptTemplateManager
    from podscribe.reports.output import build_output
    from podscribe.transcribe.oracle import LLMTranscriptionOracle

    run_dir = config.temp_dir / run_folder_name()
    chunks_dir = run_dir / "chunks"
    chunks_dir.mkdir(parents=True, exist_ok=True)
    config.output_dir.mkdir(parents=True, exist_ok=True)

    try:
        remote = is_remote_url(source) or is_spotify_url(source)

        if console:
            console.print("[cyan]Getting metadata...[/cyan]")
        if title is None:
            if remote:
                try:
                    title = get_media_info(source, config.cookies_file)["title"]
                except Exception as e:
                    logger.warning("Could not fetch metadata, using default title: %s", e)
                    title = "Unknown Title"
            else:
                title = Path(source).stem

        if remote:
            if console:
                console.print(f"[cyan]Downloading audio...[/cyan] [dim]{source}[/dim]")
            audio_path = download_audio(
                source, run_dir / "audio.mp3", config.cookies_file, console=console
            )
        else:
            audio_path = Path(source).expanduser()
            if not audio_path.exists():
                raise AcquisitionError(f"Audio file not found: {audio_path}")

        if console:
            console.print("[cyan]Preparing audio chunks...[/cyan]")
        downsampled = downsample_audio(audio_path, run_dir / "audio_16k_mono.mp3", console=console)
        chunks = split_audio(downsampled, chunks_dir, config.chunk_duration, console=console)
        if console and chunks:
            covered = format_duration(chunks[-1].end_time)
            console.print(f"[dim]  {len(chunks)} chunk(s) covering {covered}[/dim]")

        if oracle is None:
            oracle = LLMTranscriptionOracle(create_client_from_config(config, "transcription"))

        if console:
            console.print("[cyan]Transcribing chunks...[/cyan]")
        try:
            result = transcribe_chunks(chunks, oracle, config, console=console)
        finally:
            if not config.keep_chunks:
                cleanup_chunks(chunks)

        if console:
            console.print("[cyan]Extracting highlights and summary...[/cyan]")
        if text_client is None:
            text_client = create_client_from_config(config, "text")
        highlights, topics, summary = summarize(
            result.segments, text_client, PromptTemplateManager(), console=console
        )

        output = build_output(title, source, result.segments, highlights, summary, topics)
        json_path = config.output_dir / Path(
            output_name or generate_output_filename(source, "json")
        ).name
        files = write_outputs(output, result, json_path, config)

        return ProcessResult(
            output=output,
            files=files,
            chunk_count=len(chunks),
            failed_chunks=result.failed_chunks,
            degraded_merge=result.degraded_merge,
        )
    finally:
        if not config.keep_chunks:
            shutil.rmtree(run_dir, ignore_errors=True)


def process_local_file(
    path: Path,
    config: PodscribeConfig,
    output_name: str | None = None,
    title: str | None = None,
    oracle: Any = None,
    text_client: Any = None,
    console=None,
) -> ProcessResult:
    """Process an audio file already on disk, skipping acquisition.

    Raises:
        AcquisitionError: If the file does not exist or is not a file
    """
    path = Path(path).expanduser()
    if not path.is_file():
        raise AcquisitionError(f"Audio file not found: {path}")

    return process_audio(
        str(path),
        config,
        output_name=output_name,
        title=title,
        oracle=oracle,
        text_client=text_client,
        console=console,
    )
