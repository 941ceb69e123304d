"""
podscribe.models - Pipeline record types.

AudioChunk and ChunkTranscription are frozen once created. Utterance
records serialize with the on-disk field names (timestamp, ad, speaker,
text, tone).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AudioChunk(BaseModel):
    """One bounded window of the source audio."""

    model_config = ConfigDict(frozen=True)

    path: Path
    index: int = Field(ge=0)
    start_time: float = Field(ge=0.0)
    duration: float = Field(ge=0.0)

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


class TranscriptUtterance(BaseModel):
    """One utterance as returned by the oracle, timestamped relative to its chunk."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = "00:00"
    is_ad: bool = Field(default=False, alias="ad")
    speaker: str = "Unknown"
    text: str = ""
    tone: str = "Neutral"

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TranscriptSegment(TranscriptUtterance):
    """A merged utterance with an absolute HH:MM:SS timestamp."""

    @classmethod
    def from_utterance(cls, utterance: TranscriptUtterance, timestamp: str) -> TranscriptSegment:
        return cls(
            timestamp=timestamp,
            is_ad=utterance.is_ad,
            speaker=utterance.speaker,
            text=utterance.text,
            tone=utterance.tone,
        )


class ChunkTranscription(BaseModel):
    """Transcription result for a single chunk, successful or placeholder."""

    model_config = ConfigDict(frozen=True)

    chunk_index: int = Field(ge=0)
    start_time: float
    end_time: float
    utterances: tuple[TranscriptUtterance, ...] = ()
    failed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "chunkIndex": self.chunk_index,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "failed": self.failed,
            "utterances": [u.to_dict() for u in self.utterances],
        }


class FinalOutput(BaseModel):
    """The handoff artifact written to disk after summarization."""

    title: str
    source_url: str
    full_transcript: list[TranscriptSegment]
    highlights: list[str] = Field(default_factory=list)
    topics: list[str] = Field(default_factory=list)
    summary: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "source_url": self.source_url,
            "full_transcript": [s.to_dict() for s in self.full_transcript],
            "highlights": list(self.highlights),
            "topics": list(self.topics),
            "summary": self.summary,
        }
