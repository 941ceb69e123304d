"""
podscribe.extract.download - Remote media acquisition.

Fetches metadata and audio with yt-dlp (YouTube, podcast pages, direct
MP3 links) or spotdl (Spotify). Both run as subprocesses.
"""

from __future__ import annotations

import json
import shutil
import subprocess
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from podscribe.exceptions import AcquisitionError, DependencyError


def is_spotify_url(url: str) -> bool:
    """Check if the URL points at Spotify."""
    host = urlparse(url).netloc.lower()
    return host == "open.spotify.com" or host.endswith(".spotify.com") or url.startswith("spotify:")


def is_direct_mp3_url(url: str) -> bool:
    """Check if the URL is a direct link to an MP3 file."""
    path = urlparse(url).path.lower()
    return path.endswith(".mp3")


def is_remote_url(value: str) -> bool:
    """Check if the value is an http(s) URL."""
    return urlparse(value).scheme in {"http", "https"}


def _require(binary: str, install_hint: str) -> str:
    path = shutil.which(binary)
    if path is None:
        raise DependencyError(binary, "not found on PATH", install_hint)
    return path


def _run(cmd: list[str], action: str) -> subprocess.CompletedProcess:
    proc = subprocess.run(cmd, capture_output=True, text=True)
    if proc.returncode != 0:
        raise AcquisitionError(f"{action} failed: {proc.stderr.strip()[:500]}")
    return proc


def get_media_info(url: str, cookies_file: Path | None = None) -> dict[str, Any]:
    """Fetch media metadata with ``yt-dlp --dump-json``.

    Args:
        url: Source URL
        cookies_file: Optional Netscape cookies file passed to yt-dlp

    Returns:
        Dict with title, duration_seconds, uploader, and the source url

    Raises:
        AcquisitionError: If yt-dlp fails or returns unparseable output
    """
    ytdlp = _require("yt-dlp", "Install with: pip install yt-dlp")
    cmd = [ytdlp, "--dump-json", "--no-playlist"]
    if cookies_file:
        cmd += ["--cookies", str(cookies_file)]
    cmd.append(url)

    proc = _run(cmd, "Fetching media info")
    try:
        info = json.loads(proc.stdout.splitlines()[0])
    except (json.JSONDecodeError, IndexError) as e:
        raise AcquisitionError(f"Could not parse yt-dlp metadata: {e}") from e

    return {
        "url": url,
        "title": info.get("title") or info.get("fulltitle") or "Unknown Title",
        "duration_seconds": info.get("duration"),
        "uploader": info.get("channel") or info.get("uploader"),
    }


def download_audio(
    url: str,
    output_path: Path,
    cookies_file: Path | None = None,
    console=None,
) -> Path:
    """Download audio from a URL to an MP3 file.

    Args:
        url: Source URL (YouTube, podcast, direct MP3, or Spotify)
        output_path: Desired MP3 path
        cookies_file: Optional cookies file for yt-dlp
        console: Optional rich console for output

    Returns:
        Path to the downloaded MP3

    Raises:
        AcquisitionError: If the download fails or produces no file
        DependencyError: If the downloader binary is missing
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if is_spotify_url(url):
        return _download_spotify(url, output_path, console)

    ytdlp = _require("yt-dlp", "Install with: pip install yt-dlp")
    if console:
        kind = "MP3" if is_direct_mp3_url(url) else "audio"
        console.print(f"[dim]  Downloading {kind} with yt-dlp...[/dim]")

    template = str(output_path.with_suffix("")) + ".%(ext)s"
    cmd = [
        ytdlp,
        "-x",
        "--audio-format",
        "mp3",
        "--no-playlist",
        "-o",
        template,
    ]
    if cookies_file:
        cmd += ["--cookies", str(cookies_file)]
    cmd.append(url)

    _run(cmd, "Downloading audio")

    if not output_path.exists():
        raise AcquisitionError(f"yt-dlp reported success but {output_path} was not created")
    return output_path


def _download_spotify(url: str, output_path: Path, console=None) -> Path:
    """Download a Spotify episode or track with spotdl."""
    spotdl = _require("spotdl", "Install with: pip install spotdl")
    if console:
        console.print("[dim]  Downloading from Spotify with spotdl...[/dim]")

    out_dir = output_path.parent
    before = set(out_dir.glob("*.mp3"))
    _run(
        [spotdl, "download", url, "--output", str(out_dir), "--format", "mp3"],
        "Spotify download",
    )

    created = sorted(set(out_dir.glob("*.mp3")) - before, key=lambda p: p.stat().st_mtime)
    if not created:
        raise AcquisitionError("spotdl finished without producing an MP3 file")

    created[-1].replace(output_path)
    return output_path
