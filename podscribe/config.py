"""
podscribe.config - YAML config loading, environment overrides, validation.

Handles loading podscribe.yaml, applying environment variable overrides,
and validating all parameters.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

CONFIG_FILENAME = "podscribe.yaml"

ENV_OVERRIDES: dict[str, str] = {
    "PODSCRIBE_API_KEY": "api_key",
    "GEMINI_API_KEY": "api_key",
    "TEMP_DIR": "temp_dir",
    "OUTPUT_DIR": "output_dir",
}


class PodscribeConfig(BaseModel):
    """Resolved configuration for a Podscribe run."""

    llm_backend: str = "gemini"
    transcription_model: str = "gemini-2.5-flash"
    text_model: str = "gemini-2.0-flash"
    api_key: str | None = None

    chunk_duration: int = Field(default=600, gt=0)
    concurrency: int = Field(default=3, ge=1)
    max_retries: int = Field(default=3, ge=0)
    retry_base_delay: float = Field(default=1.0, ge=0.0)
    request_timeout: float | None = Field(default=None, gt=0.0)

    temp_dir: Path = Path("./temp")
    output_dir: Path = Path("./output")
    cookies_file: Path | None = None

    keep_chunks: bool = False
    write_text: bool = True
    write_report: bool = True
    debug_sidecar: bool = False

    @field_validator("llm_backend")
    @classmethod
    def validate_llm_backend(cls, v: str) -> str:
        valid = {"gemini", "openai", "claude", "ollama"}
        if v not in valid:
            raise ValueError(f"llm_backend must be one of: {valid}")
        return v

    @field_validator("transcription_model", "text_model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("model name must not be empty")
        return v.strip()


def apply_env_overrides(
    config: dict[str, Any],
    environ: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Fill unset config keys from environment variables.

    Values already present in the config file take precedence.
    """
    env = os.environ if environ is None else environ
    merged = config.copy()
    for var, key in ENV_OVERRIDES.items():
        value = env.get(var)
        if value and merged.get(key) is None:
            merged[key] = value
    return merged


def load_config(
    config_path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> PodscribeConfig:
    """Load and validate configuration.

    Args:
        config_path: Explicit config file. If None, podscribe.yaml in the
            current directory is used when present, otherwise defaults.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated PodscribeConfig

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ConfigError: If the file contents fail validation
    """
    from pydantic import ValidationError

    from podscribe.exceptions import ConfigError

    raw_config: dict[str, Any] = {}

    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"No config file found at {config_path}")
        config_file: Path | None = config_path
    else:
        candidate = Path.cwd() / CONFIG_FILENAME
        config_file = candidate if candidate.exists() else None

    if config_file is not None:
        with open(config_file) as f:
            raw_config = yaml.safe_load(f) or {}
        if not isinstance(raw_config, dict):
            raise ConfigError(f"{config_file} must contain a YAML mapping")

    merged = apply_env_overrides(raw_config, environ)

    try:
        return PodscribeConfig(**merged)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def create_default_config() -> dict[str, Any]:
    """Create a default config dict suitable for writing to podscribe.yaml."""
    defaults = PodscribeConfig()
    return {
        "llm_backend": defaults.llm_backend,
        "transcription_model": defaults.transcription_model,
        "text_model": defaults.text_model,
        "chunk_duration": defaults.chunk_duration,
        "concurrency": defaults.concurrency,
        "max_retries": defaults.max_retries,
        "retry_base_delay": defaults.retry_base_delay,
        "temp_dir": str(defaults.temp_dir),
        "output_dir": str(defaults.output_dir),
        "keep_chunks": defaults.keep_chunks,
        "write_text": defaults.write_text,
        "write_report": defaults.write_report,
        "debug_sidecar": defaults.debug_sidecar,
    }


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
