"""
Trace record model.

Shape of the JSON document persisted for each run. Options are stored
already redacted; see mas_heavy.core.trace.redact_secrets.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .final_result import FinalResult
from .judge_result import JudgeVerdict
from .report import AgentSummary


class TraceRecord(BaseModel):
	"""Audit record of one orchestration run."""

	model_config = ConfigDict(populate_by_name=True)

	trace_id: str = Field(alias="traceId")
	started_at: str = Field(alias="startedAt")
	finished_at: str | None = Field(default=None, alias="finishedAt")
	prompt: str
	opts: dict[str, Any] = Field(default_factory=dict)
	agents: list[AgentSummary] = Field(default_factory=list)
	judge: JudgeVerdict | None = None
	final: FinalResult | None = None
	error: str | None = None


__all__ = ["TraceRecord"]
