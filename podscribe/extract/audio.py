"""
podscribe.extract.audio - FFmpeg audio conversion and chunking.

Downsamples source audio to 16kHz mono and splits it into fixed-length
MP3 chunks for transcription.
"""

from __future__ import annotations

import json
import math
import subprocess
from pathlib import Path

from podscribe.exceptions import ExtractionError
from podscribe.logging import logger
from podscribe.models import AudioChunk

DEFAULT_CHUNK_DURATION = 600


def probe_duration(path: Path) -> float:
    """Get audio duration in seconds using ffprobe.

    Raises:
        ExtractionError: If ffprobe fails or reports no duration
    """
    cmd = [
        "ffprobe",
        "-v",
        "quiet",
        "-print_format",
        "json",
        "-show_format",
        str(path),
    ]
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ExtractionError("ffprobe not found. Install FFmpeg.") from e

    if proc.returncode != 0:
        raise ExtractionError(f"Failed to get audio duration for {path}: {proc.stderr}")

    try:
        duration = float(json.loads(proc.stdout)["format"]["duration"])
    except (KeyError, ValueError, TypeError) as e:
        raise ExtractionError(f"Could not determine audio duration for {path}") from e

    if duration <= 0:
        raise ExtractionError(f"Audio has no duration: {path}")
    return duration


def downsample_audio(source_path: Path, output_path: Path, console=None) -> Path:
    """Convert audio to 16kHz mono MP3.

    Raises:
        ExtractionError: If FFmpeg fails
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = [
        "ffmpeg",
        "-y",
        "-i",
        str(source_path),
        "-vn",
        "-ac",
        "1",
        "-ar",
        "16000",
        "-acodec",
        "libmp3lame",
        str(output_path),
    ]

    if console:
        console.print("[dim]  Downsampling to 16kHz mono...[/dim]")

    _run_ffmpeg(cmd, "Downsampling")
    return output_path


def plan_chunks(
    duration: float,
    chunk_duration: float,
    output_dir: Path,
    suffix: str = ".mp3",
) -> list[AudioChunk]:
    """Lay out chunk windows over an audio duration.

    Produces ceil(duration / chunk_duration) contiguous windows; all but
    the last are exactly chunk_duration long.

    Raises:
        ValueError: If chunk_duration is not positive
    """
    if chunk_duration <= 0:
        raise ValueError("chunk_duration must be positive")
    if duration <= 0:
        return []

    count = math.ceil(duration / chunk_duration)
    chunks = []
    for i in range(count):
        start = i * chunk_duration
        chunks.append(
            AudioChunk(
                path=output_dir / f"chunk_{i:03d}{suffix}",
                index=i,
                start_time=float(start),
                duration=float(min(chunk_duration, duration - start)),
            )
        )
    return chunks


def extract_chunk(source_path: Path, chunk: AudioChunk) -> None:
    """Write one chunk window to its file.

    Raises:
        ExtractionError: If FFmpeg fails
    """
    cmd = [
        "ffmpeg",
        "-y",
        "-ss",
        f"{chunk.start_time:.3f}",
        "-t",
        f"{chunk.duration:.3f}",
        "-i",
        str(source_path),
        "-vn",
        "-acodec",
        "libmp3lame",
        "-b:a",
        "32k",
        "-ac",
        "1",
        "-ar",
        "16000",
        str(chunk.path),
    ]
    _run_ffmpeg(cmd, f"Creating chunk {chunk.index}")


def split_audio(
    source_path: Path,
    output_dir: Path,
    chunk_duration: float = DEFAULT_CHUNK_DURATION,
    console=None,
) -> list[AudioChunk]:
    """Split audio into fixed-length chunks.

    Args:
        source_path: Audio to split
        output_dir: Directory for chunk files
        chunk_duration: Chunk length in seconds
        console: Optional rich console for output

    Returns:
        Chunks ordered by index, every file fully written

    Raises:
        ExtractionError: If probing or splitting fails
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    duration = probe_duration(source_path)
    chunks = plan_chunks(duration, chunk_duration, output_dir)

    if console:
        console.print(
            f"[dim]  {duration:.0f}s of audio → {len(chunks)} chunk(s) of "
            f"{chunk_duration:.0f}s[/dim]"
        )

    for chunk in chunks:
        extract_chunk(source_path, chunk)
        logger.debug(
            "Chunk %d created (%.1fs - %.1fs)", chunk.index, chunk.start_time, chunk.end_time
        )

    return chunks


def cleanup_chunks(chunks: list[AudioChunk]) -> int:
    """Delete chunk files, logging failures. Returns the number removed."""
    removed = 0
    for chunk in chunks:
        try:
            chunk.path.unlink()
            removed += 1
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning("Failed to delete chunk %s: %s", chunk.path, e)
    return removed


def _run_ffmpeg(cmd: list[str], action: str) -> None:
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ExtractionError("ffmpeg not found. Install FFmpeg.") from e
    if proc.returncode != 0:
        raise ExtractionError(f"{action} failed: {proc.stderr}")
