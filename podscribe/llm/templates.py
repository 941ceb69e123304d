"""
podscribe.llm.templates - Prompt template loading and rendering.

Uses Jinja2 to load and render prompt templates from the packaged
prompts/ directory, or a user-supplied override directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, Template

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"


class PromptTemplateManager:
    """Manages loading and rendering of prompt templates."""

    def __init__(self, prompts_dir: Path | None = None) -> None:
        self.prompts_dir = prompts_dir or PROMPTS_DIR
        self.env = Environment(
            loader=FileSystemLoader(str(self.prompts_dir)),
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._cache: dict[str, Template] = {}

    def get_template(self, name: str) -> Template:
        """Load a template by name.

        Args:
            name: Template filename (e.g., "summary.txt")

        Returns:
            Jinja2 Template object

        Raises:
            FileNotFoundError: If template doesn't exist
        """
        if name not in self._cache:
            template_path = self.prompts_dir / name
            if not template_path.exists():
                raise FileNotFoundError(f"Template not found: {template_path}")
            self._cache[name] = self.env.get_template(name)
        return self._cache[name]

    def render(
        self,
        template_name: str,
        variables: dict[str, Any] | None = None,
    ) -> str:
        """Render a template with variables.

        Args:
            template_name: Template filename
            variables: Dict of template variables

        Returns:
            Rendered prompt string
        """
        template = self.get_template(template_name)
        return template.render(**(variables or {}))

    def list_templates(self) -> list[str]:
        """List available templates."""
        if not self.prompts_dir.exists():
            return []
        return sorted(f.name for f in self.prompts_dir.glob("*.txt"))


def format_transcript_for_prompt(segments: list[Any], with_speakers: bool = False) -> str:
    """Format transcript segments for an LLM prompt.

    Args:
        segments: TranscriptSegment objects
        with_speakers: Prefix each line with "[speaker]: "

    Returns:
        Segment texts separated by blank lines
    """
    lines = []
    for seg in segments:
        text = seg.text.strip()
        if not text:
            continue
        if with_speakers:
            lines.append(f"[{seg.speaker}]: {text}")
        else:
            lines.append(text)
    return "\n\n".join(lines)
