"""
Main orchestrator for a heavy multi-agent run.

Validates the input, fans the prompt out to every agent, judges the
surviving candidates and synthesizes the final result.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping

from mas_heavy.core.agent_runner import AgentRunner
from mas_heavy.core.judge import score_candidates
from mas_heavy.core.retry import RetryPolicy
from mas_heavy.core.scheduler import ConcurrencyScheduler
from mas_heavy.core.synthesizer import synthesize
from mas_heavy.core.trace import redact_secrets, write_trace
from mas_heavy.errors import RunFatalError
from mas_heavy.integrations.transports import TransportPool
from mas_heavy.loaders.presets import build_agents
from mas_heavy.models.agent_spec import AgentSpec, assign_ids
from mas_heavy.models.config import Config
from mas_heavy.models.outcome import AgentOutcome, AgentSuccess
from mas_heavy.models.report import AgentSummary, RunReport
from mas_heavy.models.run_params import OrchestrationInput
from mas_heavy.models.trace import TraceRecord
from mas_heavy.utils.logging import get_logger
from mas_heavy.utils.protocols import LLMTransport

logger = get_logger(__name__)

TransportFactory = Callable[[AgentSpec, int], LLMTransport]
TraceWriter = Callable[[TraceRecord, Path], Any]


def _now() -> str:
	return datetime.now(timezone.utc).isoformat()


def resolve_agents(params: OrchestrationInput, config: Config) -> list[AgentSpec]:
	"""Explicit agents or the preset expansion, with ids assigned.

	Raises:
		ValueError: If agent ids collide.
	"""
	agents = params.agents or build_agents(params.preset, params.n_agents,
	                                       config.openai_model)
	return assign_ids(list(agents))


def _trace_options(params: OrchestrationInput) -> dict[str, Any]:
	opts = params.model_dump(mode="json", by_alias=True,
	                         exclude={"prompt", "repo_context"})
	opts["hasRepoContext"] = bool(params.repo_context)
	return redact_secrets(opts)


async def _persist_trace(record: TraceRecord, config: Config,
                         trace_writer: TraceWriter) -> None:
	"""Write a trace in a worker thread; failures are only logged."""
	try:
		await asyncio.to_thread(trace_writer, record, config.trace_path)
	except Exception:
		logger.warning("failed to write trace %s", record.trace_id,
		               exc_info=True)


async def run_orchestration(
    raw_input: OrchestrationInput | Mapping[str, Any],
    *,
    config: Config | None = None,
    scheduler: ConcurrencyScheduler | None = None,
    transport_factory: TransportFactory | None = None,
    retry_policy: RetryPolicy | None = None,
    trace_writer: TraceWriter | None = None,
) -> RunReport:
	"""
	Run all agents concurrently, judge them and build the final result.

	Parameters:
		raw_input: Tool input, validated here before any call is made.
		config: Application configuration (defaults to the environment).
		scheduler: Long-lived scheduler owning provider limiters; a
			private one is created when omitted.
		transport_factory: Maps (agent, timeout_ms) to a transport;
			defaults to a TransportPool scoped to this run.
		retry_policy: Overrides the policy derived from config.
		trace_writer: Persists the trace record when tracing is on
			(defaults to write_trace).

	Returns:
		RunReport with one summary per agent in input order.

	Raises:
		pydantic.ValidationError: If the input is invalid.
		ValueError: If agent ids collide.
		RunFatalError: If every agent failed.
	"""
	params = (raw_input if isinstance(raw_input, OrchestrationInput) else
	          OrchestrationInput.model_validate(raw_input))
	config = config or Config()
	trace_writer = trace_writer or write_trace
	agents = resolve_agents(params, config)
	scheduler = scheduler or ConcurrencyScheduler()
	policy = retry_policy or RetryPolicy.from_config(config)
	trace_id = uuid.uuid4().hex
	started_at = _now()
	logger.info("run %s start agents=%d preset=%s", trace_id, len(agents),
	            params.preset if params.agents is None else "explicit")

	pool: TransportPool | None = None
	if transport_factory is None:
		pool = TransportPool(config)
		transport_factory = pool.for_agent
	factory = transport_factory

	def runner_factory(spec: AgentSpec) -> AgentRunner:
		return AgentRunner(factory(spec, params.timeout_ms), policy,
		                   config.max_repair_attempts)

	def trace_record(outcomes: list[AgentOutcome], **extra: Any) -> TraceRecord:
		return TraceRecord(
		    trace_id=trace_id,
		    started_at=started_at,
		    finished_at=_now(),
		    prompt=params.prompt,
		    opts=_trace_options(params),
		    agents=[AgentSummary.from_outcome(o) for o in outcomes],
		    **extra,
		)

	try:
		outcomes = await scheduler.run_all(
		    agents,
		    params.prompt,
		    params.repo_context,
		    runner_factory,
		    max_in_flight_per_provider=params.max_in_flight_per_provider,
		    timeout_ms=params.timeout_ms,
		)
	except RunFatalError as exc:
		exc.trace_id = trace_id
		logger.error("run %s failed: %s", trace_id, exc)
		if params.trace:
			await _persist_trace(trace_record(exc.outcomes, error=str(exc)),
			                     config, trace_writer)
		raise
	finally:
		if pool is not None:
			await pool.aclose()

	candidates = [o.candidate for o in outcomes if isinstance(o, AgentSuccess)]
	verdict = score_candidates(candidates)
	final = synthesize(candidates[verdict.best_index], verdict)
	report = RunReport(
	    trace_id=trace_id,
	    agents=[AgentSummary.from_outcome(o) for o in outcomes],
	    judge=verdict,
	    final=final,
	)
	if params.trace:
		await _persist_trace(trace_record(outcomes, judge=verdict, final=final),
		                     config, trace_writer)
	logger.info("run %s done best=%d of %d candidates", trace_id,
	            verdict.best_index, len(candidates))
	return report


__all__ = ["run_orchestration", "resolve_agents"]
