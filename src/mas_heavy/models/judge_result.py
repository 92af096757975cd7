"""
Judge result models.

Defines models for candidate scoring and selection of the best candidate.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Score(BaseModel):
	"""
	Score for a single candidate from the judge.

	Each axis is clamped to the 0..10 range.
	"""

	model_config = ConfigDict(frozen=True)

	accuracy: float = Field(ge=0, le=10)
	executability: float = Field(ge=0, le=10)
	risk: float = Field(ge=0, le=10)
	testability: float = Field(ge=0, le=10)

	@property
	def total(self) -> float:
		return self.accuracy + self.executability + self.risk + self.testability


class JudgeVerdict(BaseModel):
	"""Judge outcome with scores index-aligned to the successful candidates."""

	model_config = ConfigDict(frozen=True, populate_by_name=True)

	scores: list[Score]
	best_index: int = Field(alias="bestIndex", ge=0)
	rationale: str
	improvements: str

	@model_validator(mode="after")
	def check_best_index(self) -> "JudgeVerdict":
		if self.best_index >= len(self.scores):
			raise ValueError(
			    f"bestIndex {self.best_index} out of range for "
			    f"{len(self.scores)} scores")
		return self

	def total(self, index: int) -> float:
		"""Total score of candidate ``index``."""
		return self.scores[index].total


__all__ = ["Score", "JudgeVerdict"]
