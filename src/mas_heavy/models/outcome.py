"""
Agent outcome models.

An outcome is either AgentSuccess or AgentFailure, discriminated on
``status`` so that serialized traces round-trip into the right type.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .agent_spec import AgentSpec
from .candidate import AgentCandidate


class _OutcomeBase(BaseModel):
	model_config = ConfigDict(frozen=True)

	agent: AgentSpec
	latency_ms: int = Field(ge=0)
	attempts: int = Field(default=0, ge=0,
	                      description="Transport calls issued")
	repairs: int = Field(default=0, ge=0,
	                     description="Repair round-trips issued")


class AgentSuccess(_OutcomeBase):
	"""Agent produced a valid candidate."""

	status: Literal["ok"] = "ok"
	candidate: AgentCandidate


class AgentFailure(_OutcomeBase):
	"""Agent failed; ``error`` carries the reason."""

	status: Literal["error"] = "error"
	error: str


AgentOutcome = Annotated[Union[AgentSuccess, AgentFailure],
                         Field(discriminator="status")]

__all__ = ["AgentOutcome", "AgentSuccess", "AgentFailure"]
