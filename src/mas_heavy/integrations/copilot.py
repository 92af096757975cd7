"""
GitHub Copilot SDK transport.

Each complete() call runs in its own short-lived session: the system
turn becomes the session system message and the remaining turns are
flattened into a single prompt.
"""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Sequence

from mas_heavy.errors import TransportError
from mas_heavy.models.messages import LLMMessage, LLMResponse
from mas_heavy.utils.logging import get_logger
from mas_heavy.utils.protocols import CopilotClientProtocol, SessionProtocol

logger = get_logger(__name__)

ClientProvider = Callable[[], Awaitable[CopilotClientProtocol]]


def flatten_conversation(messages: Sequence[LLMMessage]) -> tuple[str, str]:
	"""Split messages into (system text, prompt text).

	A lone user turn is sent verbatim; longer conversations (repair
	rounds) are rendered turn by turn with role headers.
	"""
	system = "\n\n".join(m.content for m in messages if m.role == "system")
	turns = [m for m in messages if m.role != "system"]
	if len(turns) == 1:
		return system, turns[0].content
	prompt = "\n\n".join(f"[{m.role}]\n{m.content}" for m in turns)
	return system, prompt


async def destroy_session_safe(session: SessionProtocol | None) -> None:
	"""Destroy a session, logging but not raising on failure."""
	if not session:
		return
	try:
		await session.destroy()
	except Exception:
		logger.debug("failed to destroy copilot session", exc_info=True)


class CopilotTransport:
	"""Transport backed by a started Copilot client.

	Parameters:
		client_provider: Coroutine returning a started client.
		model: Copilot model name.
		timeout_ms: Timeout passed to ``send_and_wait``.
	"""

	provider = "copilot"

	def __init__(self, client_provider: ClientProvider, model: str,
	             timeout_ms: int) -> None:
		self._client_provider = client_provider
		self.model = model
		self.timeout_ms = timeout_ms

	async def complete(self,
	                   messages: Sequence[LLMMessage],
	                   temperature: float = 0.2) -> LLMResponse:
		# Copilot sessions do not expose a sampling temperature.
		started = time.monotonic()
		system, prompt = flatten_conversation(messages)
		session = None
		try:
			client = await self._client_provider()
			session_config: dict = {"model": self.model, "streaming": False}
			if system:
				session_config["system_message"] = {"text": system}
			session = await client.create_session(session_config)
			try:
				response = await session.send_and_wait(
				    {"prompt": prompt}, timeout=self.timeout_ms / 1000)
			except asyncio.TimeoutError as exc:
				try:
					await session.abort()
				except Exception:
					logger.debug("failed to abort copilot session",
					             exc_info=True)
				raise TransportError(
				    f"Copilot request timed out after {self.timeout_ms}ms",
				    aborted=True) from exc
		except TransportError:
			raise
		except Exception as exc:
			raise TransportError(f"Copilot error: {exc}") from exc
		finally:
			await destroy_session_safe(session)

		content = ""
		if response and getattr(response, "data", None):
			content = getattr(response.data, "content", None) or ""
		return LLMResponse(content=content,
		                   latency_ms=int((time.monotonic() - started) * 1000))


__all__ = ["CopilotTransport", "flatten_conversation", "destroy_session_safe"]
