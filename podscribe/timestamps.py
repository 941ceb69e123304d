"""
podscribe.timestamps - Transcript timestamp math.

Handles conversion between seconds and the MM:SS / HH:MM:SS strings used
by the transcription oracle (chunk-relative) and the merged transcript
(absolute).
"""

from __future__ import annotations

from podscribe.exceptions import TimestampFormatError


def timestamp_to_seconds(timestamp: str) -> int:
    """Convert an MM:SS or HH:MM:SS timestamp to whole seconds.

    Args:
        timestamp: Timestamp string. Surrounding whitespace is ignored.

    Returns:
        Time in seconds

    Raises:
        TimestampFormatError: If the string is not MM:SS or HH:MM:SS
    """
    if not isinstance(timestamp, str):
        raise TimestampFormatError(
            f"Invalid timestamp format. Expected MM:SS or HH:MM:SS, got {timestamp!r}"
        )

    parts = timestamp.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise TimestampFormatError(
            f"Invalid timestamp format. Expected MM:SS or HH:MM:SS, got {timestamp!r}"
        )

    values = [int(p) for p in parts]
    if len(values) == 2:
        minutes, seconds = values
        return minutes * 60 + seconds

    hours, minutes, seconds = values
    return hours * 3600 + minutes * 60 + seconds


def seconds_to_timestamp(seconds: float) -> str:
    """Format seconds as zero-padded HH:MM:SS.

    Fractional seconds are floored; negative values clamp to zero.
    """
    total = max(0, int(seconds))
    hours = total // 3600
    minutes = (total % 3600) // 60
    secs = total % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def seconds_to_chunk_timestamp(seconds: float) -> str:
    """Format seconds as MM:SS, the chunk-relative form the oracle emits."""
    total = max(0, int(seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


def adjust_timestamp(timestamp: str, offset_seconds: float) -> str:
    """Shift a timestamp by an offset and return it as HH:MM:SS."""
    return seconds_to_timestamp(timestamp_to_seconds(timestamp) + offset_seconds)


def is_valid_timestamp(timestamp: object) -> bool:
    """Check whether a value parses as MM:SS or HH:MM:SS."""
    try:
        timestamp_to_seconds(timestamp)  # type: ignore[arg-type]
    except TimestampFormatError:
        return False
    return True
