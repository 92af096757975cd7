"""
Provider to transport mapping.

A TransportPool hands out one transport per agent and owns any shared
backend connection (the Copilot client) for the duration of a run.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx

from mas_heavy.errors import TransportError
from mas_heavy.integrations.copilot import CopilotTransport
from mas_heavy.integrations.openai_http import OpenAITransport
from mas_heavy.models.agent_spec import AgentSpec
from mas_heavy.models.config import Config
from mas_heavy.utils.logging import get_logger
from mas_heavy.utils.protocols import CopilotClientProtocol, LLMTransport

logger = get_logger(__name__)

SUPPORTED_PROVIDERS = ("openai", "copilot")


def copilot_client_options(config: Config) -> dict[str, Any]:
	"""Copilot connection options: an external CLI server when `cli_url` is
	set, otherwise a spawned stdio CLI authenticated with the GitHub token."""
	opts: dict[str, Any] = {"log_level": config.log_level}
	if not config.use_native_cli:
		opts["cli_url"] = config.cli_url
	elif config.github_token:
		opts["github_token"] = config.github_token
	return opts


def create_copilot_client(config: Config) -> CopilotClientProtocol:
	from copilot import CopilotClient

	return CopilotClient(copilot_client_options(config))


class TransportPool:
	"""Build transports for agents and manage shared clients.

	Parameters:
		config: Application configuration.
		copilot_factory: Builds the (unstarted) Copilot client.
		http_client: HTTP client shared by OpenAI transports. Built on first
			use when omitted; closed by aclose() either way.
	"""

	def __init__(
	    self,
	    config: Config,
	    copilot_factory: Callable[[Config], CopilotClientProtocol]
	    | None = None,
	    http_client: httpx.AsyncClient | None = None,
	) -> None:
		self.config = config
		self._copilot_factory = copilot_factory or create_copilot_client
		self._copilot: CopilotClientProtocol | None = None
		self._copilot_lock = asyncio.Lock()
		self._http: httpx.AsyncClient | None = http_client

	def _http_client(self) -> httpx.AsyncClient:
		if self._http is None:
			self._http = httpx.AsyncClient()
		return self._http

	async def _copilot_client(self) -> CopilotClientProtocol:
		async with self._copilot_lock:
			if self._copilot is None:
				client = self._copilot_factory(self.config)
				await client.start()
				logger.info("copilot client started")
				self._copilot = client
			return self._copilot

	def for_agent(self, spec: AgentSpec, timeout_ms: int) -> LLMTransport:
		"""
		Return the transport for an agent's provider.

		Raises:
			TransportError: For unknown providers or missing credentials.
		"""
		if spec.provider == "openai":
			if not self.config.openai_api_key:
				raise TransportError(
				    "OPENAI_API_KEY is required for OpenAI adapter.")
			return OpenAITransport(
			    api_key=self.config.openai_api_key,
			    base_url=self.config.openai_base_url,
			    model=spec.model,
			    timeout_ms=timeout_ms,
			    client=self._http_client(),
			)
		if spec.provider == "copilot":
			return CopilotTransport(self._copilot_client, spec.model
			                        or self.config.copilot_model, timeout_ms)
		raise TransportError(f"Unsupported provider: {spec.provider}")

	async def aclose(self) -> None:
		"""Close the shared HTTP client and stop the Copilot client."""
		if self._http is not None:
			await self._http.aclose()
			self._http = None
		if self._copilot is None:
			return
		try:
			await self._copilot.stop()
		except Exception:
			logger.debug("failed to stop copilot client", exc_info=True)
		finally:
			self._copilot = None

	async def __aenter__(self) -> "TransportPool":
		return self

	async def __aexit__(self, *exc_info) -> None:
		await self.aclose()


__all__ = [
    "TransportPool",
    "SUPPORTED_PROVIDERS",
    "copilot_client_options",
    "create_copilot_client",
]
