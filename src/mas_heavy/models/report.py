"""
Run report models.

A RunReport is created once per orchestration call and returned to the
caller; the engine keeps nothing of it afterwards.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .final_result import FinalResult
from .judge_result import JudgeVerdict
from .outcome import AgentFailure, AgentOutcome, AgentSuccess

SUMMARY_CHARS = 200


class AgentSummary(BaseModel):
	"""Per-agent line of a run report."""

	model_config = ConfigDict(populate_by_name=True)

	id: str
	role: str
	provider: str
	model: str
	latency_ms: int = Field(alias="latencyMs")
	status: Literal["ok", "error"]
	summary: str
	error: str | None = None

	@classmethod
	def from_outcome(cls, outcome: AgentOutcome) -> "AgentSummary":
		"""Summarize an outcome: plan excerpt on success, error otherwise."""
		agent = outcome.agent
		if isinstance(outcome, AgentSuccess):
			summary = outcome.candidate.plan[:SUMMARY_CHARS]
			error = None
		else:
			assert isinstance(outcome, AgentFailure)
			summary = outcome.error or "unknown error"
			error = outcome.error
		return cls(
		    id=agent.id or "",
		    role=agent.role,
		    provider=agent.provider,
		    model=agent.model,
		    latency_ms=outcome.latency_ms,
		    status=outcome.status,
		    summary=summary,
		    error=error,
		)


class RunReport(BaseModel):
	"""Result of one orchestration run."""

	model_config = ConfigDict(populate_by_name=True)

	trace_id: str = Field(alias="traceId")
	agents: list[AgentSummary]
	judge: JudgeVerdict
	final: FinalResult


__all__ = ["AgentSummary", "RunReport", "SUMMARY_CHARS"]
