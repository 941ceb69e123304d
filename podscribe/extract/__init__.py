"""
podscribe.extract - Media acquisition and audio chunking.

Downloads remote audio (yt-dlp, spotdl), downsamples it to 16kHz mono,
and splits it into fixed-length chunks for transcription.
"""

from __future__ import annotations
