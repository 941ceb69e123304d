"""
podscribe.reports - Output file generation.

Writes the pipeline's handoff artifacts:
- Final JSON output (transcript, highlights, topics, summary)
- Plain-text transcript
- Metadata report with speaker and tone statistics
- Optional diagnostic sidecar with raw chunk data
"""

from __future__ import annotations

from podscribe.reports.generator import ReportGenerator
from podscribe.reports.output import (
    build_output,
    save_debug_sidecar,
    save_metadata_report,
    save_output_json,
    save_transcript_text,
)

__all__ = [
    "ReportGenerator",
    "build_output",
    "save_debug_sidecar",
    "save_metadata_report",
    "save_output_json",
    "save_transcript_text",
]
