"""Strict JSON object parsing for configuration values."""

from __future__ import annotations

import json
from typing import Any, Dict

from .errors import JsonParseError


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_map(raw: object) -> Dict[str, Any]:
    """Decode ``raw`` into a dict, preserving key definition order.

    Raises:
        JsonParseError: if ``raw`` is not a string, is not valid JSON, or does
            not decode to a JSON object.
    """
    if not isinstance(raw, str):
        raise JsonParseError(raw, f"expected a string, got {type(raw).__name__}")
    try:
        data = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise JsonParseError(raw, str(e)) from e
    except RecursionError as e:
        raise JsonParseError(raw, "JSON nesting is too deep") from e
    if not isinstance(data, dict):
        raise JsonParseError(raw, f"expected a JSON object, got {type(data).__name__}")
    return data
