"""
podscribe.exceptions - Custom exception classes.

All Podscribe-specific exceptions inherit from PodscribeError.
"""


class PodscribeError(Exception):
    """Base exception for all Podscribe errors."""

    pass


class ConfigError(PodscribeError):
    """Configuration loading or validation error."""

    pass


class AcquisitionError(PodscribeError):
    """Media download or metadata lookup error."""

    pass


class ExtractionError(PodscribeError):
    """Audio conversion or chunking error."""

    pass


class TranscriptionError(PodscribeError):
    """Transcription error."""

    pass


class TimestampFormatError(PodscribeError, ValueError):
    """Timestamp string is not MM:SS or HH:MM:SS."""

    pass


class MergeError(PodscribeError):
    """Chunk transcriptions could not be merged."""

    pass


class LLMError(PodscribeError):
    """LLM backend or prompt error."""

    pass


class LLMResponseError(LLMError):
    """LLM returned malformed or unexpected response."""

    pass


class DependencyError(PodscribeError):
    """Required dependency missing or misconfigured."""

    def __init__(self, dependency: str, message: str, install_hint: str | None = None):
        self.dependency = dependency
        self.message = message
        self.install_hint = install_hint
        super().__init__(f"{dependency}: {message}")
