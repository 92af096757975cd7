"""
Run trace persistence and secret redaction.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mas_heavy.models.trace import TraceRecord
from mas_heavy.utils.logging import get_logger
from mas_heavy.utils.paths import ensure_within

logger = get_logger(__name__)

REDACTED = "***"
_SECRET_KEY_PARTS = ("key", "token")


def redact_secrets(obj: Any) -> Any:
	"""
	Recursively mask values stored under secret-looking keys.

	A key is secret-looking when its lowercase form contains "key" or
	"token". Lists are walked; other values are returned as-is.
	"""
	if isinstance(obj, list):
		return [redact_secrets(item) for item in obj]
	if isinstance(obj, dict):
		redacted: dict[Any, Any] = {}
		for key, value in obj.items():
			if any(part in str(key).lower() for part in _SECRET_KEY_PARTS):
				redacted[key] = REDACTED
			else:
				redacted[key] = redact_secrets(value)
		return redacted
	return obj


def write_trace(record: TraceRecord, trace_dir: Path | str) -> Path:
	"""
	Write a trace record as ``<trace_dir>/<traceId>.json``.

	Parameters:
		record: Trace to persist.
		trace_dir: Destination directory, created when missing.

	Returns:
		Path of the written file.

	Raises:
		ValueError: If the trace id would escape ``trace_dir``.
	"""
	base = Path(trace_dir)
	path = ensure_within(base, base / f"{record.trace_id}.json")
	base.mkdir(parents=True, exist_ok=True)
	payload = record.model_dump(mode="json", by_alias=True)
	path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
	logger.debug("trace %s written to %s", record.trace_id, path)
	return path


__all__ = ["redact_secrets", "write_trace", "REDACTED"]
