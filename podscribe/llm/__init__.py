"""
podscribe.llm - LLM access and text passes.

litellm client for audio transcription and text prompts, lenient JSON
parsing, Jinja2 prompt templates, and the highlights/summary passes.
"""

from __future__ import annotations
