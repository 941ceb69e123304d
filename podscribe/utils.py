"""
podscribe.utils - Shared utility functions.

Contains common functions used across multiple modules to avoid duplication.
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path


def format_duration(seconds: float) -> str:
    """Format seconds as HH:MM:SS or MM:SS.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (HH:MM:SS if >= 1 hour, otherwise MM:SS)
    """
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_size(path: Path) -> str:
    """Format file size in human-readable format."""
    if not path.exists():
        return "-"
    size = path.stat().st_size
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} TB"


def generate_output_filename(
    url: str,
    extension: str = "json",
    now: datetime | None = None,
) -> str:
    """Build an output filename from the source URL and current time.

    Args:
        url: Source URL or path
        extension: File extension without dot
        now: Timestamp to embed (defaults to current time)

    Returns:
        Filename like transcript_https___www_youtu_2026-10-19T12-00-00.json
    """
    stamp = (now or datetime.now()).isoformat(timespec="seconds").replace(":", "-")
    url_slug = re.sub(r"[^a-zA-Z0-9]", "_", url)[:20]
    return f"transcript_{url_slug}_{stamp}.{extension}"


def run_folder_name(now: datetime | None = None) -> str:
    """Per-run temp folder name, YYYY-MM-DD_HHMMSS."""
    return (now or datetime.now()).strftime("%Y-%m-%d_%H%M%S")
