"""
Final result model.

The deliverable returned to the caller: the chosen candidate plus the
judge's improvement note and rollback guidance.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class FinalResult(BaseModel):
	"""Synthesized answer of a run."""

	model_config = ConfigDict(frozen=True)

	plan: str
	patch: str
	test_plan: str
	risks: str
	rollback: str
	confidence: float = Field(ge=0, le=1)


__all__ = ["FinalResult"]
