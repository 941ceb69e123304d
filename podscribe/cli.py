"""
podscribe.cli - Typer CLI entry point.

Provides the process, transcribe, info, and init-config commands.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from podscribe import __version__
from podscribe.config import (
    CONFIG_FILENAME,
    PodscribeConfig,
    create_default_config,
    load_config,
    write_config,
)
from podscribe.exceptions import ConfigError, PodscribeError
from podscribe.logging import configure_logging
from podscribe.utils import format_size

if TYPE_CHECKING:
    from podscribe.pipeline import ProcessResult

app = typer.Typer(
    name="podscribe",
    help="YouTube/podcast audio downloader, transcriber and summarizer.\n\n"
    "Splits audio into chunks, transcribes them concurrently with a multimodal "
    "LLM, and merges the results into one speaker- and tone-annotated transcript.",
    add_completion=False,
)
console = Console(stderr=True)

REQUIRED_TOOLS = {
    "ffmpeg": "brew install ffmpeg / sudo apt install ffmpeg",
    "ffprobe": "ships with ffmpeg",
    "yt-dlp": "pip install yt-dlp",
    "spotdl": "pip install spotdl (Spotify URLs only)",
}


def version_callback(value: bool) -> None:
    if value:
        console.print(f"podscribe {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Podscribe - chunked audio transcription and summarization."""
    configure_logging(verbose, console)


def _resolve_config(config_path: Path | None, updates: dict) -> PodscribeConfig:
    """Load config, apply CLI overrides, and check the API key, or exit 1."""
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        config = config.model_validate({**config.model_dump(), **updates})
    except ValueError as e:
        console.print(f"[red]Error: Invalid option: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if not config.api_key and config.llm_backend != "ollama":
        console.print("[red]Error: No API key configured[/red]")
        console.print("[dim]Set GEMINI_API_KEY or api_key in podscribe.yaml[/dim]")
        raise typer.Exit(1)

    return config


def _collect_updates(
    chunk_duration: int | None,
    concurrency: int | None,
    temp_dir: Path | None,
    keep_chunks: bool,
    no_text: bool,
    no_report: bool,
    debug_sidecar: bool,
) -> dict:
    overrides = {
        "chunk_duration": chunk_duration,
        "concurrency": concurrency,
        "temp_dir": temp_dir,
    }
    updates = {k: v for k, v in overrides.items() if v is not None}
    if keep_chunks:
        updates["keep_chunks"] = True
    if no_text:
        updates["write_text"] = False
    if no_report:
        updates["write_report"] = False
    if debug_sidecar:
        updates["debug_sidecar"] = True
    return updates


def _print_result(result: ProcessResult, print_json: bool) -> None:
    table = Table(title="Output Files")
    table.add_column("Kind", style="cyan")
    table.add_column("Path", style="green")
    table.add_column("Size", justify="right")
    for kind, path in result.files.items():
        table.add_row(kind, str(path), format_size(path))
    console.print(table)

    if result.failed_chunks:
        console.print(
            f"[yellow]Warning: {len(result.failed_chunks)}/{result.chunk_count} chunk(s) "
            f"failed: {', '.join(str(i) for i in result.failed_chunks)}[/yellow]"
        )
    if result.degraded_merge:
        console.print("[yellow]Warning: timestamps are chunk-relative (merge fallback)[/yellow]")

    console.print(
        f"\n[green]✓[/green] {len(result.output.full_transcript)} segments, "
        f"{len(result.output.highlights)} highlights"
    )

    if print_json:
        typer.echo(json.dumps(result.output.to_dict(), indent=2, ensure_ascii=False))


@app.command("process")
def process(
    source: str = typer.Argument(..., help="YouTube/podcast/MP3/Spotify URL or local audio file"),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output JSON filename (written inside the output dir)"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help=f"Config file (default: ./{CONFIG_FILENAME} if present)"
    ),
    title: str | None = typer.Option(None, "--title", help="Override the source title"),
    chunk_duration: int | None = typer.Option(
        None, "--chunk-duration", "-d", help="Chunk length in seconds (default: 600)"
    ),
    concurrency: int | None = typer.Option(
        None, "--concurrency", "-j", help="Maximum concurrent transcription requests"
    ),
    temp_dir: Path | None = typer.Option(None, "--temp-dir", "-t", help="Temporary directory"),
    keep_chunks: bool = typer.Option(False, "--keep-chunks", "-k", help="Keep audio chunks"),
    no_text: bool = typer.Option(False, "--no-text", help="Skip the text transcript file"),
    no_report: bool = typer.Option(False, "--no-report", help="Skip the metadata report file"),
    debug_sidecar: bool = typer.Option(
        False, "--debug-sidecar", help="Write raw chunk results to a diagnostic JSON file"
    ),
    print_json: bool = typer.Option(False, "--json", help="Print the final JSON to stdout"),
) -> None:
    """Download, transcribe, and summarize an audio source."""
    config = _resolve_config(
        config_path,
        _collect_updates(
            chunk_duration, concurrency, temp_dir, keep_chunks, no_text, no_report, debug_sidecar
        ),
    )

    from podscribe.pipeline import process_audio

    console.print(f"[cyan]Processing[/cyan] {source}\n")

    try:
        result = process_audio(source, config, output_name=output, title=title, console=console)
    except PodscribeError as e:
        console.print(f"\n[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _print_result(result, print_json)


@app.command("transcribe")
def transcribe(
    file: Path = typer.Argument(..., help="Local audio file"),
    output: str | None = typer.Option(
        None, "--output", "-o", help="Output JSON filename (written inside the output dir)"
    ),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help=f"Config file (default: ./{CONFIG_FILENAME} if present)"
    ),
    title: str | None = typer.Option(None, "--title", help="Title (default: file name)"),
    chunk_duration: int | None = typer.Option(
        None, "--chunk-duration", "-d", help="Chunk length in seconds (default: 600)"
    ),
    concurrency: int | None = typer.Option(
        None, "--concurrency", "-j", help="Maximum concurrent transcription requests"
    ),
    temp_dir: Path | None = typer.Option(None, "--temp-dir", "-t", help="Temporary directory"),
    keep_chunks: bool = typer.Option(False, "--keep-chunks", "-k", help="Keep audio chunks"),
    no_text: bool = typer.Option(False, "--no-text", help="Skip the text transcript file"),
    no_report: bool = typer.Option(False, "--no-report", help="Skip the metadata report file"),
    debug_sidecar: bool = typer.Option(
        False, "--debug-sidecar", help="Write raw chunk results to a diagnostic JSON file"
    ),
    print_json: bool = typer.Option(False, "--json", help="Print the final JSON to stdout"),
) -> None:
    """Transcribe and summarize a local audio file."""
    if not file.exists():
        console.print(f"[red]Error: File not found: {file}[/red]")
        raise typer.Exit(1)

    config = _resolve_config(
        config_path,
        _collect_updates(
            chunk_duration, concurrency, temp_dir, keep_chunks, no_text, no_report, debug_sidecar
        ),
    )

    from podscribe.pipeline import process_local_file

    console.print(f"[cyan]Transcribing[/cyan] {file}\n")

    try:
        result = process_local_file(file, config, output_name=output, title=title, console=console)
    except PodscribeError as e:
        console.print(f"\n[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _print_result(result, print_json)


@app.command("info")
def info() -> None:
    """Show required external tools and whether they are installed."""
    table = Table(title="Dependencies")
    table.add_column("Tool", style="cyan")
    table.add_column("Status")
    table.add_column("Install", style="dim")

    for tool, hint in REQUIRED_TOOLS.items():
        found = shutil.which(tool) is not None
        status = "[green]found[/green]" if found else "[yellow]missing[/yellow]"
        table.add_row(tool, status, hint)

    console.print(table)

    try:
        config = load_config()
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Config error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    key_status = "[green]set[/green]" if config.api_key else "[yellow]not set[/yellow]"
    console.print(f"\nLLM backend: {config.llm_backend} ({config.transcription_model})")
    console.print(f"API key: {key_status}")


@app.command("init-config")
def init_config(
    path: Path = typer.Option(Path(CONFIG_FILENAME), "--path", "-p", help="Where to write"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
) -> None:
    """Write a default podscribe.yaml."""
    if path.exists() and not force:
        console.print(f"[red]Error: '{path}' already exists[/red]")
        raise typer.Exit(1)

    write_config(create_default_config(), path)
    console.print(f"[green]✓[/green] Wrote {path}")
