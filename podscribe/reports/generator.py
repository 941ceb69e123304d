"""
podscribe.reports.generator - Jinja2-based text report generator.

Renders the plain-text transcript and metadata report templates.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from podscribe.io import write_text


class ReportGenerator:
    """Jinja2-based plain-text report generator."""

    def __init__(self, template_dir: Path | None = None):
        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"

        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=False,
        )

    def render_string(self, template_name: str, data: dict[str, Any]) -> str:
        """Render a template to a string."""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def render(
        self,
        template_name: str,
        data: dict[str, Any],
        output_path: Path,
    ) -> Path:
        """Render a report template to a text file.

        Args:
            template_name: Name of the template file
            data: Data dictionary to inject into template
            output_path: Path to write the file

        Returns:
            Path to the generated file
        """
        write_text(output_path, self.render_string(template_name, data))
        return output_path
