"""Utility functions."""

import json
import math
import re
from typing import Any, Dict

_JSON_BLOCK_RE = re.compile(r"\{.*\}", re.DOTALL)


def extract_json(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of model text output.

    1) the whole text as JSON
    2) the first "{" ... last "}" block (models like to wrap JSON in prose or ```json fences)

    Raises ValueError if neither yields an object.
    """
    if not text or not text.strip():
        raise ValueError("Empty model output")

    try:
        parsed = json.loads(text.strip())
        if isinstance(parsed, dict):
            return parsed
    except json.JSONDecodeError:
        pass

    match = _JSON_BLOCK_RE.search(text)
    if not match:
        raise ValueError("No JSON object detected")

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON block in model output: {e}") from e

    if not isinstance(parsed, dict):
        raise ValueError("JSON block is not an object")
    return parsed


def to_int(value: Any) -> int:
    """Coerce a model-reported number to int; anything unusable becomes 0."""
    if isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    # half away from zero, not banker's rounding
    return int(math.floor(abs(number) + 0.5)) * (1 if number >= 0 else -1)
