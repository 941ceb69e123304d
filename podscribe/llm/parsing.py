"""
podscribe.llm.parsing - LLM output JSON parsing with validation.

Handles parsing LLM responses into JSON arrays with layered recovery:
strict parse, then bracketed-substring extraction, then repair.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

from podscribe.exceptions import LLMResponseError

ArrayCheck = Callable[[list[Any]], bool]


def strip_code_fences(response: str) -> str:
    """Remove markdown code fences, keeping their contents."""
    text = response.strip()
    if "```" in text:
        text = re.sub(r"```[a-zA-Z]*\s*", "", text)
        text = text.replace("```", "").strip()
    return text


def _accepted(data: Any, accept: ArrayCheck | None) -> bool:
    return isinstance(data, list) and (accept is None or accept(data))


def parse_strict_array(response: str, accept: ArrayCheck | None = None) -> list[Any] | None:
    """Parse the whole response as a JSON array, or return None."""
    try:
        data = json.loads(response.strip())
    except (json.JSONDecodeError, ValueError):
        return None
    return data if _accepted(data, accept) else None


def extract_json_array(response: str, accept: ArrayCheck | None = None) -> list[Any] | None:
    """Find the first well-formed JSON array embedded in free text.

    Every '[' is tried as a starting point, so commentary containing
    stray brackets before the real payload does not derail extraction.
    Arrays rejected by ``accept`` are skipped and the scan continues.
    """
    text = strip_code_fences(response)
    decoder = json.JSONDecoder()

    for match in re.finditer(r"\[", text):
        try:
            data, _ = decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        if _accepted(data, accept):
            return data
    return None


def repair_json(text: str) -> str:
    """Attempt to repair common JSON issues.

    Args:
        text: JSON string with potential issues

    Returns:
        Repaired JSON string
    """
    open_braces = text.count("{") - text.count("}")
    open_brackets = text.count("[") - text.count("]")

    if open_braces > 0:
        text += "}" * open_braces
    if open_brackets > 0:
        text += "]" * open_brackets

    # Remove trailing commas before } or ]
    text = re.sub(r",(\s*[}\]])", r"\1", text)

    return text


def parse_repaired_array(response: str, accept: ArrayCheck | None = None) -> list[Any] | None:
    """Repair a bracketed span and parse it, or return None.

    Spans run from each '[' to the last ']' (or to the end when the
    response was cut off), earliest start first.
    """
    text = strip_code_fences(response)
    end = text.rfind("]")

    for match in re.finditer(r"\[", text):
        start = match.start()
        candidate = text[start : end + 1] if end > start else text[start:]
        try:
            data = json.loads(repair_json(candidate))
        except (json.JSONDecodeError, ValueError):
            continue
        if _accepted(data, accept):
            return data
    return None


def parse_llm_json_array(response: str, accept: ArrayCheck | None = None) -> list[Any]:
    """Parse a JSON array from an LLM response with error recovery.

    Handles common issues:
    - Markdown code blocks (```json ... ```)
    - Text before/after the array
    - Trailing commas and truncated closers

    Args:
        response: Raw LLM response text
        accept: Optional check an array must pass to be returned

    Returns:
        Parsed JSON list

    Raises:
        LLMResponseError: If no array can be recovered
    """
    for layer in (parse_strict_array, extract_json_array, parse_repaired_array):
        data = layer(response, accept)
        if data is not None:
            return data

    raise LLMResponseError(
        f"Failed to parse LLM response as a JSON array.\n\n"
        f"Response (first 500 chars):\n{response[:500]}"
    )


def validate_highlights_response(data: list[Any]) -> list[str]:
    """Keep only non-empty string highlights, stripped."""
    return [item.strip() for item in data if isinstance(item, str) and item.strip()]
