"""
Protocol definitions for dependency injection.

Defines Protocol classes for the LLM transport and the Copilot client
and session interfaces to enable testing with mock implementations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, Sequence

if TYPE_CHECKING:
	from mas_heavy.models.messages import LLMMessage, LLMResponse


class LLMTransport(Protocol):
	"""
	Protocol for an LLM backend.

	Implementations raise TransportError on failure.
	"""

	async def complete(self, messages: Sequence["LLMMessage"],
	                   temperature: float) -> "LLMResponse":
		"""Send the conversation and return the reply text."""
		...


class SessionProtocol(Protocol):
	"""
	Protocol for Copilot session interface.

	Defines the expected methods for interacting with a Copilot session.
	"""

	async def send_and_wait(self, options: dict,
	                        timeout: float | None = None) -> Any:
		"""Send a prompt and wait for response."""
		...

	async def abort(self) -> Any:
		"""Abort the current session operation."""
		...

	async def destroy(self) -> Any:
		"""Destroy the session and release resources."""
		...


class CopilotClientProtocol(Protocol):
	"""
	Protocol for Copilot client interface.

	Defines the expected methods for managing a Copilot client.
	"""

	async def start(self) -> Any:
		"""Start the client connection."""
		...

	async def stop(self) -> Any:
		"""Stop the client connection."""
		...

	async def create_session(self, config: dict) -> SessionProtocol:
		"""Create a new session with the given configuration."""
		...


__all__ = ["LLMTransport", "SessionProtocol", "CopilotClientProtocol"]
