"""Core orchestration logic.

This subpackage contains the engine that runs agents concurrently,
judges their candidates and synthesizes the final result.

Key modules:
    - runner: Main orchestration via run_orchestration()
    - agent_runner: Single agent execution with retry and repair
    - scheduler: Per-provider concurrency limits
    - judge: Deterministic candidate scoring
    - synthesizer: Final result construction
    - review: Static patch review
    - trace: Trace redaction and persistence
"""

from mas_heavy.core.runner import run_orchestration, resolve_agents
from mas_heavy.core.agent_runner import AgentRunner, build_messages
from mas_heavy.core.scheduler import ConcurrencyScheduler, ProviderLimiter
from mas_heavy.core.retry import RetryPolicy, is_retryable_error
from mas_heavy.core.judge import score_candidates, score_candidate
from mas_heavy.core.synthesizer import synthesize
from mas_heavy.core.review import review_patch
from mas_heavy.core.trace import redact_secrets, write_trace

__all__ = [
    # runner
    "run_orchestration",
    "resolve_agents",
    # agent_runner
    "AgentRunner",
    "build_messages",
    # scheduler
    "ConcurrencyScheduler",
    "ProviderLimiter",
    # retry
    "RetryPolicy",
    "is_retryable_error",
    # judge
    "score_candidates",
    "score_candidate",
    # synthesizer
    "synthesize",
    # review
    "review_patch",
    # trace
    "redact_secrets",
    "write_trace",
]
