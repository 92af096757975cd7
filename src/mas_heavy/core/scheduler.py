"""
Provider-bounded concurrent fan-out of agent runs.

One ConcurrencyScheduler lives for the server (or CLI) lifetime and owns
the per-provider limiters; each run_all() call joins on every submission
before returning.
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional, Sequence

from mas_heavy.core.agent_runner import AgentRunner
from mas_heavy.errors import RunFatalError
from mas_heavy.models.agent_spec import AgentSpec
from mas_heavy.models.outcome import AgentFailure, AgentOutcome, AgentSuccess
from mas_heavy.utils.logging import get_logger

logger = get_logger(__name__)

RunnerFactory = Callable[[AgentSpec], AgentRunner]


class ProviderLimiter:
	"""FIFO concurrency cap for one provider."""

	def __init__(self, provider: str, limit: int) -> None:
		if limit <= 0:
			raise ValueError("limit must be > 0")
		self.provider = provider
		self.limit = limit
		self._sem = asyncio.Semaphore(limit)
		self.in_flight = 0
		self.peak_in_flight = 0

	async def __aenter__(self) -> "ProviderLimiter":
		await self._sem.acquire()
		self.in_flight += 1
		self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
		return self

	async def __aexit__(self, *exc_info) -> None:
		self.in_flight -= 1
		self._sem.release()


class ConcurrencyScheduler:
	"""Fan out agent runs with a per-provider in-flight cap."""

	def __init__(self) -> None:
		self._limiters: dict[str, ProviderLimiter] = {}

	def limiter_for(self, provider: str, limit: int) -> ProviderLimiter:
		"""Return the provider's limiter, creating it on first use.

		A request for a different cap replaces the limiter; holders of
		the previous one still release on the object they acquired.
		"""
		limiter = self._limiters.get(provider)
		if limiter is None or limiter.limit != limit:
			if limiter is not None:
				logger.debug("provider %s limit changed %d -> %d", provider,
				             limiter.limit, limit)
			limiter = ProviderLimiter(provider, limit)
			self._limiters[provider] = limiter
		return limiter

	@property
	def providers(self) -> list[str]:
		return list(self._limiters)

	async def _submit(
	    self,
	    spec: AgentSpec,
	    limiter: ProviderLimiter,
	    runner_factory: RunnerFactory,
	    prompt: str,
	    repo_context: Optional[str],
	    timeout_ms: int,
	) -> AgentOutcome:
		async with limiter:
			runner = runner_factory(spec)
			return await runner.run(spec, prompt, repo_context, timeout_ms)

	async def run_all(
	    self,
	    specs: Sequence[AgentSpec],
	    prompt: str,
	    repo_context: Optional[str],
	    runner_factory: RunnerFactory,
	    max_in_flight_per_provider: int = 2,
	    timeout_ms: int = 60000,
	) -> list[AgentOutcome]:
		"""
		Run every spec and return outcomes index-aligned with ``specs``.

		Parameters:
			specs: Agents to run; ids must already be assigned.
			prompt: Task prompt.
			repo_context: Optional repository context.
			runner_factory: Builds the AgentRunner for a spec. Errors it
				raises become that spec's AgentFailure.
			max_in_flight_per_provider: Concurrent calls per provider.
			timeout_ms: Per-call timeout.

		Returns:
			One outcome per spec, in input order.

		Raises:
			RunFatalError: If no spec produced a success.
		"""
		started = time.monotonic()
		tasks = [
		    self._submit(
		        spec,
		        self.limiter_for(spec.provider, max_in_flight_per_provider),
		        runner_factory,
		        prompt,
		        repo_context,
		        timeout_ms,
		    ) for spec in specs
		]
		settled = await asyncio.gather(*tasks, return_exceptions=True)
		logger.debug("all %d agent submissions settled", len(settled))

		outcomes: list[AgentOutcome] = []
		for spec, res in zip(specs, settled):
			if isinstance(res, BaseException):
				if isinstance(res, (KeyboardInterrupt, SystemExit)):
					raise res
				logger.warning("agent %s submission failed: %s", spec.id, res)
				outcomes.append(
				    AgentFailure(
				        agent=spec,
				        error=str(res) or type(res).__name__,
				        latency_ms=int((time.monotonic() - started) * 1000),
				    ))
			else:
				outcomes.append(res)

		ok = sum(1 for o in outcomes if isinstance(o, AgentSuccess))
		logger.info("agents finished: %d ok, %d failed", ok,
		            len(outcomes) - ok)
		if ok == 0:
			raise RunFatalError("All agents failed. See trace for details.",
			                    outcomes=outcomes)
		return outcomes


__all__ = ["ConcurrencyScheduler", "ProviderLimiter", "RunnerFactory"]
