"""Tests for podscribe CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from podscribe import __version__, pipeline
from podscribe.cli import app
from podscribe.exceptions import TranscriptionError
from podscribe.models import FinalOutput, TranscriptSegment
from podscribe.pipeline import ProcessResult

runner = CliRunner()


@pytest.fixture
def clean_env(tmp_path: Path, monkeypatch) -> Path:
    """Run in an empty directory with no API key in the environment."""
    monkeypatch.chdir(tmp_path)
    for var in ("GEMINI_API_KEY", "PODSCRIBE_API_KEY", "TEMP_DIR", "OUTPUT_DIR"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


def _fake_result(tmp_path: Path, failed: list[int] | None = None) -> ProcessResult:
    output = FinalOutput(
        title="Ep",
        source_url="https://example.com/ep.mp3",
        full_transcript=[TranscriptSegment(timestamp="00:00:05", speaker="Host", text="Hi")],
        highlights=["One"],
        summary="Sum",
    )
    json_path = tmp_path / "out.json"
    json_path.write_text("{}")
    return ProcessResult(
        output=output,
        files={"json": json_path},
        chunk_count=3,
        failed_chunks=failed or [],
    )


class TestVersion:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestInitConfigCommand:
    def test_writes_default_config(self, clean_env: Path) -> None:
        result = runner.invoke(app, ["init-config"])
        assert result.exit_code == 0
        data = yaml.safe_load((clean_env / "podscribe.yaml").read_text())
        assert data["concurrency"] == 3

    def test_refuses_to_overwrite(self, clean_env: Path) -> None:
        (clean_env / "podscribe.yaml").write_text("concurrency: 9\n")
        result = runner.invoke(app, ["init-config"])
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert "9" in (clean_env / "podscribe.yaml").read_text()

    def test_force_overwrites(self, clean_env: Path) -> None:
        (clean_env / "podscribe.yaml").write_text("concurrency: 9\n")
        result = runner.invoke(app, ["init-config", "--force"])
        assert result.exit_code == 0
        assert yaml.safe_load((clean_env / "podscribe.yaml").read_text())["concurrency"] == 3


class TestProcessCommand:
    def test_requires_api_key(self, clean_env: Path) -> None:
        result = runner.invoke(app, ["process", "https://example.com/ep.mp3"])
        assert result.exit_code == 1
        assert "No API key" in result.output

    def test_invalid_option(self, clean_env: Path, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        result = runner.invoke(app, ["process", "x.mp3", "--concurrency", "0"])
        assert result.exit_code == 1
        assert "Invalid option" in result.output

    def test_missing_config_file(self, clean_env: Path) -> None:
        result = runner.invoke(app, ["process", "x.mp3", "-c", "nope.yaml"])
        assert result.exit_code == 1
        assert "No config file" in result.output

    def test_passes_overrides_and_prints_json(self, clean_env: Path, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        seen = {}

        def fake_process(source, config, output_name=None, title=None, console=None):
            seen.update(source=source, config=config, output_name=output_name)
            return _fake_result(clean_env)

        monkeypatch.setattr(pipeline, "process_audio", fake_process)

        result = runner.invoke(
            app,
            ["process", "https://example.com/ep.mp3", "-j", "5", "-d", "300", "--no-text", "--json"],
        )

        assert result.exit_code == 0, result.output
        assert seen["config"].concurrency == 5
        assert seen["config"].chunk_duration == 300
        assert seen["config"].write_text is False
        assert '"title": "Ep"' in result.output
        assert "Output Files" in result.output

    def test_warns_on_failed_chunks(self, clean_env: Path, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.setattr(
            pipeline, "process_audio", lambda *a, **k: _fake_result(clean_env, failed=[1])
        )

        result = runner.invoke(app, ["process", "https://example.com/ep.mp3"])

        assert result.exit_code == 0
        assert "1/3 chunk(s) failed" in result.output

    def test_pipeline_error_exits_1(self, clean_env: Path, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "k")

        def fail(*args, **kwargs):
            raise TranscriptionError("No chunk produced a usable transcript")

        monkeypatch.setattr(pipeline, "process_audio", fail)

        result = runner.invoke(app, ["process", "https://example.com/ep.mp3"])

        assert result.exit_code == 1
        assert "No chunk produced" in result.output

    def test_json_flag_output_is_valid(self, clean_env: Path, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        monkeypatch.setattr(pipeline, "process_audio", lambda *a, **k: _fake_result(clean_env))

        result = runner.invoke(app, ["process", "https://example.com/ep.mp3", "--json"])

        start = result.stdout.index("{")
        assert json.loads(result.stdout[start:])["summary"] == "Sum"


class TestTranscribeCommand:
    def test_missing_file(self, clean_env: Path) -> None:
        result = runner.invoke(app, ["transcribe", "missing.mp3"])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_runs_local_pipeline(self, clean_env: Path, monkeypatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "k")
        (clean_env / "show.mp3").write_bytes(b"mp3")
        seen = {}

        def fake_local(path, config, output_name=None, title=None, console=None):
            seen["path"] = path
            return _fake_result(clean_env)

        monkeypatch.setattr(pipeline, "process_local_file", fake_local)

        result = runner.invoke(app, ["transcribe", "show.mp3", "--title", "Show"])

        assert result.exit_code == 0, result.output
        assert seen["path"] == Path("show.mp3")


class TestInfoCommand:
    def test_lists_tools(self, clean_env: Path) -> None:
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert "ffmpeg" in result.output
        assert "API key" in result.output

