"""
Single agent runner.

Drives one agent from message construction to an AgentOutcome:
bounded transport calls with retry, then a bounded repair loop when the
reply does not validate as an AgentCandidate.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Optional

from mas_heavy.errors import StructuralError, TransportError
from mas_heavy.core.retry import RetryPolicy
from mas_heavy.loaders.prompts import load_prompt, render_prompt
from mas_heavy.models.agent_spec import AgentSpec
from mas_heavy.models.candidate import parse_candidate
from mas_heavy.models.messages import LLMMessage, LLMResponse
from mas_heavy.models.outcome import AgentFailure, AgentOutcome, AgentSuccess
from mas_heavy.utils.logging import get_logger
from mas_heavy.utils.protocols import LLMTransport

logger = get_logger(__name__)

DEFAULT_MAX_REPAIRS = 2


@dataclass
class _Attempts:
	"""Transport calls made during one run, retries included."""

	count: int = 0


def build_system_prompt(role: str) -> str:
	"""Role instructions plus the fixed output contract."""
	return " ".join(
	    line.strip()
	    for line in render_prompt("agent_system.md", role=role).splitlines()
	    if line.strip())


def build_messages(spec: AgentSpec, prompt: str,
                   repo_context: Optional[str]) -> list[LLMMessage]:
	"""Compose the initial system and user turns for an agent."""
	user_parts = [prompt]
	if repo_context:
		user_parts.append(f"Repo context:\n{repo_context}")
	return [
	    LLMMessage(role="system", content=build_system_prompt(spec.role)),
	    LLMMessage(role="user",
	               content="\n\n".join(p for p in user_parts if p)),
	]


class AgentRunner:
	"""Run one agent against a transport.

	Parameters:
		transport: Backend used for every call of this agent.
		retry_policy: Policy applied to each call.
		max_repairs: Extra calls allowed after an invalid reply.
	"""

	def __init__(
	    self,
	    transport: LLMTransport,
	    retry_policy: RetryPolicy | None = None,
	    max_repairs: int = DEFAULT_MAX_REPAIRS,
	) -> None:
		self.transport = transport
		self.retry_policy = retry_policy or RetryPolicy()
		self.max_repairs = max_repairs

	async def _call_once(self, messages: list[LLMMessage], temperature: float,
	                     timeout_ms: int, counter: _Attempts) -> LLMResponse:
		counter.count += 1
		try:
			return await asyncio.wait_for(
			    self.transport.complete(list(messages), temperature),
			    timeout=timeout_ms / 1000,
			)
		except asyncio.TimeoutError as exc:
			raise TransportError(f"Timeout after {timeout_ms}ms",
			                     aborted=True) from exc

	async def _call(self, messages: list[LLMMessage], temperature: float,
	                timeout_ms: int, counter: _Attempts) -> LLMResponse:
		return await self.retry_policy.run(
		    lambda: self._call_once(messages, temperature, timeout_ms, counter))

	async def run(
	    self,
	    spec: AgentSpec,
	    prompt: str,
	    repo_context: Optional[str],
	    timeout_ms: int,
	) -> AgentOutcome:
		"""
		Run the agent to completion.

		Never raises for agent-level problems: transport failures that
		survive retries and unrepairable output both become AgentFailure.

		Parameters:
			spec: Agent to run (id already assigned).
			prompt: Task prompt.
			repo_context: Optional repository context.
			timeout_ms: Bound for each individual call.

		Returns:
			AgentSuccess or AgentFailure.
		"""
		started = time.monotonic()
		counter = _Attempts()
		messages = build_messages(spec, prompt, repo_context)
		repairs = 0
		logger.info("agent %s start role=%s provider=%s model=%s", spec.id,
		            spec.role, spec.provider, spec.model)

		def elapsed_ms() -> int:
			return int((time.monotonic() - started) * 1000)

		while True:
			try:
				response = await self._call(messages, spec.temperature,
				                            timeout_ms, counter)
			except Exception as exc:
				logger.warning("agent %s transport failure: %s", spec.id, exc)
				return AgentFailure(
				    agent=spec,
				    error=str(exc) or type(exc).__name__,
				    latency_ms=elapsed_ms(),
				    attempts=counter.count,
				    repairs=repairs,
				)

			content = response.content.strip()
			try:
				candidate = parse_candidate(content)
			except StructuralError as exc:
				if repairs >= self.max_repairs:
					logger.warning("agent %s gave up after %d repairs: %s",
					               spec.id, repairs, exc)
					return AgentFailure(
					    agent=spec,
					    error=(f"Invalid JSON response after {repairs + 1} "
					           f"attempts: {exc}"),
					    latency_ms=elapsed_ms(),
					    attempts=counter.count,
					    repairs=repairs,
					)
				repairs += 1
				logger.info("agent %s invalid output, repair %d/%d: %s",
				            spec.id, repairs, self.max_repairs, exc)
				messages.append(LLMMessage(role="assistant", content=content))
				messages.append(
				    LLMMessage(role="user", content=load_prompt("repair.md")))
				continue

			logger.info("agent %s completed in %dms (attempts=%d repairs=%d)",
			            spec.id, elapsed_ms(), counter.count, repairs)
			return AgentSuccess(
			    agent=spec,
			    candidate=candidate,
			    latency_ms=elapsed_ms(),
			    attempts=counter.count,
			    repairs=repairs,
			)


__all__ = ["AgentRunner", "build_messages", "build_system_prompt"]
