"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from podscribe.models import AudioChunk, ChunkTranscription, TranscriptSegment, TranscriptUtterance


class StaticOracle:
    """Oracle that returns the same response for every chunk."""

    def __init__(self, response: str) -> None:
        self.response = response
        self.calls: list[tuple[bytes, str, str]] = []

    async def transcribe(self, audio: bytes, mime_type: str, instruction: str) -> str:
        self.calls.append((audio, mime_type, instruction))
        return self.response


class ScriptedOracle:
    """Oracle keyed by chunk audio bytes.

    ``responses`` maps audio bytes to either a response string or an
    exception instance to raise. Tracks concurrency high-water mark.
    """

    def __init__(self, responses: dict[bytes, object], delay: float = 0.0) -> None:
        self.responses = responses
        self.delay = delay
        self.calls: list[bytes] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def transcribe(self, audio: bytes, mime_type: str, instruction: str) -> str:
        self.calls.append(audio)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            response = self.responses[audio]
            if isinstance(response, BaseException):
                raise response
            return response
        finally:
            self.in_flight -= 1


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def utterance_json(*items: dict) -> str:
    return json.dumps(list(items))


@pytest.fixture
def make_chunks(tmp_path: Path):
    """Factory writing ``count`` fake chunk files with distinct contents."""

    def _make(count: int, duration: float = 600.0) -> list[AudioChunk]:
        chunks = []
        for i in range(count):
            path = tmp_path / f"chunk_{i:03d}.mp3"
            path.write_bytes(f"chunk-{i}".encode())
            chunks.append(
                AudioChunk(path=path, index=i, start_time=i * duration, duration=duration)
            )
        return chunks

    return _make


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def sample_chunk_transcriptions() -> list[ChunkTranscription]:
    """Three 600s chunks, each with one utterance at 00:05."""
    return [
        ChunkTranscription(
            chunk_index=i,
            start_time=i * 600.0,
            end_time=(i + 1) * 600.0,
            utterances=(
                TranscriptUtterance(
                    timestamp="00:05",
                    speaker="Host",
                    text=f"Utterance from chunk {i}",
                    tone="calm",
                ),
            ),
        )
        for i in range(3)
    ]


@pytest.fixture
def sample_segments() -> list[TranscriptSegment]:
    return [
        TranscriptSegment(
            timestamp="00:00:05",
            speaker="Host",
            text="Welcome back to the show, today we are talking about rivers and water.",
            tone="calm",
        ),
        TranscriptSegment(
            timestamp="00:00:30",
            is_ad=True,
            speaker="Host",
            text="This episode is brought to you by Acme.",
            tone="upbeat",
        ),
        TranscriptSegment(
            timestamp="00:01:10",
            speaker="Guest",
            text="Why do rivers matter so much to you?",
            tone="excited",
        ),
        TranscriptSegment(
            timestamp="00:02:00",
            speaker="host",
            text="Rivers shaped my whole childhood.",
            tone="calm",
        ),
    ]
