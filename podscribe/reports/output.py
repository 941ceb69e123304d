"""
podscribe.reports.output - Final output assembly and serialization.

Builds the FinalOutput artifact and writes it as JSON, plain text, and a
statistics report. The diagnostic sidecar is optional and not part of
the functional output.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from podscribe.io import write_json
from podscribe.merge.speakers import unique_speakers
from podscribe.models import ChunkTranscription, FinalOutput, TranscriptSegment
from podscribe.reports.generator import ReportGenerator


def build_output(
    title: str,
    source_url: str,
    segments: Sequence[TranscriptSegment],
    highlights: Sequence[str],
    summary: str,
    topics: Sequence[str] = (),
) -> FinalOutput:
    """Assemble the final output artifact."""
    return FinalOutput(
        title=title,
        source_url=source_url,
        full_transcript=list(segments),
        highlights=list(highlights),
        topics=list(topics),
        summary=summary,
    )


def save_output_json(output: FinalOutput, path: Path) -> Path:
    """Write the final output as pretty JSON."""
    write_json(path, output)
    return path


def save_transcript_text(
    segments: Sequence[TranscriptSegment],
    path: Path,
    include_metadata: bool = True,
    generator: ReportGenerator | None = None,
) -> Path:
    """Write the transcript as plain text.

    Args:
        segments: Final transcript segments
        path: Output path
        include_metadata: Include header and per-segment timestamp/ad/speaker/tone
        generator: ReportGenerator to use (default templates if None)

    Returns:
        Path to the written file
    """
    generator = generator or ReportGenerator()
    return generator.render(
        "transcript.txt",
        {"segments": list(segments), "include_metadata": include_metadata},
        path,
    )


def tone_distribution(segments: Sequence[TranscriptSegment]) -> list[tuple[str, int, str]]:
    """Tone counts in order of first appearance, with one-decimal percentages."""
    counts = Counter(seg.tone or "Unknown" for seg in segments)
    total = len(segments)
    return [
        (tone, count, f"{count / total * 100:.1f}")
        for tone, count in counts.items()
    ]


def save_metadata_report(
    output: FinalOutput,
    path: Path,
    generated_at: datetime | None = None,
    generator: ReportGenerator | None = None,
) -> Path:
    """Write the metadata report: summary, highlights, speaker and tone stats."""
    generator = generator or ReportGenerator()
    segments = output.full_transcript

    data = {
        "title": output.title,
        "source_url": output.source_url,
        "generated_at": (generated_at or datetime.now()).isoformat(timespec="seconds"),
        "summary": output.summary,
        "highlights": output.highlights,
        "topics": output.topics,
        "segment_count": len(segments),
        "ad_count": sum(1 for s in segments if s.is_ad),
        "speakers": unique_speakers(segments),
        "tones": tone_distribution(segments),
    }
    return generator.render("report.txt", data, path)


def save_debug_sidecar(
    path: Path,
    chunk_transcriptions: Sequence[ChunkTranscription],
    merged: Sequence[TranscriptSegment],
    speaker_mapping: dict[str, str],
    degraded_merge: bool = False,
) -> Path:
    """Write raw chunk results and the pre-normalization merge for debugging."""
    write_json(
        path,
        {
            "written_at": datetime.now().isoformat(timespec="seconds"),
            "degraded_merge": degraded_merge,
            "chunks": [c.to_dict() for c in chunk_transcriptions],
            "merged_before_normalization": [s.to_dict() for s in merged],
            "speaker_mapping": speaker_mapping,
        },
    )
    return path
