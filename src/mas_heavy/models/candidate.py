"""
Agent candidate model and its validation boundary.

Every agent reply passes through parse_candidate() before anything else
touches it; nothing downstream sees unvalidated model output.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mas_heavy.errors import StructuralError
from mas_heavy.utils.parsing import load_json_object


class AgentCandidate(BaseModel):
	"""Structurally valid output of one agent."""

	model_config = ConfigDict(frozen=True, strict=True)

	plan: str
	patch: str = Field(description="Unified diff")
	test_plan: str = Field(description="Runnable commands and expectations")
	risks: str
	assumptions: str
	confidence: float = Field(ge=0, le=1)


def _format_validation_error(exc: ValidationError) -> str:
	"""Flatten a pydantic error into one diagnostic line."""
	parts = []
	for err in exc.errors():
		loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
		parts.append(f"{loc}: {err.get('msg')}")
	return "; ".join(parts)


def parse_candidate(text: str) -> AgentCandidate:
	"""
	Parse and validate raw agent output.

	Parameters:
		text: Raw text returned by the transport.

	Returns:
		The validated AgentCandidate.

	Raises:
		StructuralError: If the text is not a bare JSON object or the object
			does not match the candidate shape.
	"""
	try:
		data = load_json_object(text)
	except ValueError as exc:
		raise StructuralError(f"invalid JSON: {exc}") from exc
	try:
		return AgentCandidate.model_validate(data)
	except ValidationError as exc:
		raise StructuralError(
		    f"schema mismatch: {_format_validation_error(exc)}") from exc


__all__ = ["AgentCandidate", "parse_candidate"]
