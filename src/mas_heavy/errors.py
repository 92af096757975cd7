"""
Exception types shared across the orchestration engine.

Agent-level failures are recorded as AgentFailure values; only the
errors below cross component boundaries as exceptions.
"""

from __future__ import annotations

from typing import Any


class MasHeavyError(Exception):
	"""Base class for mas-heavy errors."""


class TransportError(MasHeavyError):
	"""A transport call failed.

	Parameters:
		message: Human readable failure description.
		status: HTTP-style status code when the backend returned one.
		aborted: True when the call was cancelled or timed out.
		retryable: Explicit transient marker set by the transport.
	"""

	def __init__(
	    self,
	    message: str,
	    *,
	    status: int | None = None,
	    aborted: bool = False,
	    retryable: bool = False,
	) -> None:
		super().__init__(message)
		self.status = status
		self.aborted = aborted
		self.retryable = retryable


class StructuralError(MasHeavyError):
	"""Agent output failed to parse into an AgentCandidate."""


class RunFatalError(MasHeavyError):
	"""No agent produced a usable candidate; the run cannot continue."""

	def __init__(
	    self,
	    message: str,
	    *,
	    outcomes: list[Any] | None = None,
	    trace_id: str | None = None,
	) -> None:
		super().__init__(message)
		self.outcomes = outcomes or []
		self.trace_id = trace_id


__all__ = [
    "MasHeavyError",
    "TransportError",
    "StructuralError",
    "RunFatalError",
]
