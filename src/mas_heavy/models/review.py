"""
Patch review result model.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ReviewOutput(BaseModel):
	"""Heuristic findings for a patch."""

	findings: list[str] = Field(default_factory=list)
	risk: Literal["low", "medium"]
	recommendations: list[str] = Field(default_factory=list)


__all__ = ["ReviewOutput"]
