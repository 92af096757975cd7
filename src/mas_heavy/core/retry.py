"""
Retry policy for transport calls.

Classifies failures as transient and re-issues the same call with
capped exponential backoff.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from mas_heavy.models.config import Config
from mas_heavy.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def is_retryable_error(error: BaseException) -> bool:
	"""
	Return True when an error is expected to succeed on retry.

	Retryable errors are explicitly marked ``retryable``, carry a status
	of 429 or >= 500, or represent a timed out / aborted call.
	"""
	if getattr(error, "retryable", False):
		return True
	status = getattr(error, "status", None)
	if isinstance(status, int) and (status == 429 or status >= 500):
		return True
	if getattr(error, "aborted", False):
		return True
	return isinstance(error, (asyncio.TimeoutError, TimeoutError))


class RetryPolicy(BaseModel):
	"""Capped exponential backoff for transient transport failures."""

	model_config = ConfigDict(frozen=True)

	max_retries: int = Field(default=3, ge=0)
	base_delay_ms: int = Field(default=500, gt=0)
	max_delay_ms: int = Field(default=5000, gt=0)

	@classmethod
	def from_config(cls, config: Config) -> "RetryPolicy":
		return cls(
		    max_retries=config.retry_max_retries,
		    base_delay_ms=config.retry_base_delay_ms,
		    max_delay_ms=config.retry_max_delay_ms,
		)

	def should_retry(self, error: BaseException) -> bool:
		return is_retryable_error(error)

	def delay(self, attempt: int) -> float:
		"""Backoff in seconds before retry number ``attempt`` (0-indexed)."""
		return min(self.base_delay_ms * 2**attempt, self.max_delay_ms) / 1000

	async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
		"""
		Run ``operation`` until it succeeds or retrying is pointless.

		Parameters:
			operation: Zero-argument coroutine factory; called once per
				attempt.

		Returns:
			The operation's result.

		Raises:
			The last error, unchanged, when it is not retryable or all
			``max_retries`` retries are used up.
		"""
		attempt = 0
		while True:
			try:
				return await operation()
			except Exception as exc:
				if not self.should_retry(exc) or attempt >= self.max_retries:
					raise
				wait = self.delay(attempt)
				logger.warning(
				    "transient failure (attempt %d/%d), retrying in %.2fs: %s",
				    attempt + 1,
				    self.max_retries + 1,
				    wait,
				    exc,
				)
				await asyncio.sleep(wait)
				attempt += 1


__all__ = ["RetryPolicy", "is_retryable_error"]
