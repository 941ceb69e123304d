"""
podscribe.transcribe.oracle - Transcription oracle adapters.

An oracle is any object with an async ``transcribe(audio, mime_type,
instruction) -> str`` method. Responses are untrusted free text.
"""

from __future__ import annotations

from pathlib import Path

from podscribe.llm.client import LLMClient
from podscribe.llm.templates import PromptTemplateManager

MIME_TYPES = {
    ".mp3": "audio/mp3",
    ".wav": "audio/wav",
    ".m4a": "audio/m4a",
    ".aac": "audio/aac",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
}


def mime_type_for(path: Path) -> str:
    """MIME type for an audio chunk file, audio/mp3 when unknown."""
    return MIME_TYPES.get(path.suffix.lower(), "audio/mp3")


def build_instruction(
    template_manager: PromptTemplateManager | None = None,
    language: str | None = None,
) -> str:
    """Render the fixed transcription instruction."""
    manager = template_manager or PromptTemplateManager()
    return manager.render("transcribe.txt", {"LANGUAGE": language})


class LLMTranscriptionOracle:
    """Oracle backed by a multimodal LLM through litellm."""

    def __init__(self, client: LLMClient) -> None:
        self.client = client

    async def transcribe(self, audio: bytes, mime_type: str, instruction: str) -> str:
        return await self.client.complete_with_audio(audio, mime_type, instruction)
