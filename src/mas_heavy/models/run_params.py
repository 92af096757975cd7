"""
Tool input models.

Defines the validated inputs of the orchestration and review entry
points. Wire names are camelCase; Python callers may use either form.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .agent_spec import AgentSpec

MIN_AGENTS = 4
MAX_AGENTS = 12
DEFAULT_MAX_IN_FLIGHT = 2
DEFAULT_TIMEOUT_MS = 60000

Preset = Literal["balanced", "quality", "speed", "security"]


class OrchestrationInput(BaseModel):
	"""Validated input of the heavy orchestration tool."""

	model_config = ConfigDict(populate_by_name=True)

	prompt: str = Field(description="Task given to every agent")
	n_agents: int = Field(alias="nAgents", ge=MIN_AGENTS, le=MAX_AGENTS,
	                      description="Number of agents, 4..12")
	preset: Preset = Field(
	    default="balanced",
	    description="Role preset used when agents is not given")
	agents: Optional[list[AgentSpec]] = Field(
	    default=None, description="Explicit agent list (len == nAgents)")
	repo_context: Optional[str] = Field(default=None, alias="repoContext",
	                                    description="Extra repository context")
	max_in_flight_per_provider: int = Field(
	    default=DEFAULT_MAX_IN_FLIGHT,
	    alias="maxInFlightPerProvider",
	    gt=0,
	    description="Concurrent calls per provider")
	timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, alias="timeoutMs",
	                        gt=0, description="Per-call timeout")
	trace: bool = Field(default=True, description="Persist a trace record")

	@model_validator(mode="after")
	def check_agents_length(self) -> "OrchestrationInput":
		if self.agents is not None and len(self.agents) != self.n_agents:
			raise ValueError("agents length must match nAgents")
		return self


class ReviewInput(BaseModel):
	"""Validated input of the patch review tool."""

	model_config = ConfigDict(populate_by_name=True)

	patch_or_diff: str = Field(alias="patchOrDiff",
	                           description="Patch or unified diff to review")
	criteria: list[str] = Field(default_factory=list,
	                            description="Extra criteria to report on")


__all__ = [
    "OrchestrationInput",
    "ReviewInput",
    "Preset",
    "MIN_AGENTS",
    "MAX_AGENTS",
    "DEFAULT_MAX_IN_FLIGHT",
    "DEFAULT_TIMEOUT_MS",
]
