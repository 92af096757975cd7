"""
JSON decoding for model output.

Agents must reply with a bare JSON object. Fenced blocks or prose
around the object are rejected so the caller can ask for a repair.
"""

from __future__ import annotations

import json
from typing import Any


def load_json_object(text: str) -> dict[str, Any]:
	"""
	Decode the whole trimmed text as one JSON object.

	Parameters:
		text: Raw model output.

	Returns:
		The decoded object.

	Raises:
		ValueError: If the text is empty, is not valid JSON, or decodes
			to something other than an object.
	"""
	stripped = text.strip()
	if not stripped:
		raise ValueError("empty response")
	try:
		parsed = json.loads(stripped)
	except json.JSONDecodeError as exc:
		raise ValueError(str(exc)) from exc
	if not isinstance(parsed, dict):
		raise ValueError(f"expected a JSON object, got {type(parsed).__name__}")
	return parsed


__all__ = [
    "load_json_object",
]
