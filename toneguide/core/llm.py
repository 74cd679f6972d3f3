"""Helpers for reading JSON out of raw LLM output."""

import json
import re
from typing import Any


def strip_llm_fences(raw_output: str) -> str:
    """Strip markdown code fences from LLM output.

    Handles: ```json ... ```, ``` ... ```, leading/trailing whitespace.
    """
    cleaned = raw_output.strip()

    # Extract JSON from markdown code fences
    fence_match = re.search(r"```(?:json)?\s*\n?(.*?)```", cleaned, re.DOTALL)
    if fence_match:
        return fence_match.group(1).strip()

    # Fallback: strip an unterminated leading fence
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def parse_llm_json_dict(raw_output: str) -> Any:
    """
    Parse LLM output as JSON.

    Args:
        raw_output: Raw string from LLM response

    Returns:
        Parsed JSON value (normally a dict)

    Raises:
        json.JSONDecodeError: If JSON parsing fails after cleanup
    """
    cleaned = strip_llm_fences(raw_output)
    parsed = json.loads(cleaned)
    if isinstance(parsed, str):
        # Model double-encoded its answer
        parsed = json.loads(parsed)
    return parsed
