"""
OpenAI-compatible chat completions transport.

Issues exactly one HTTP request per complete() call; retries and
timeouts are the caller's concern.
"""

from __future__ import annotations

import time
from typing import Any, Sequence

import httpx

from mas_heavy.errors import TransportError
from mas_heavy.models.messages import LLMMessage, LLMResponse
from mas_heavy.utils.logging import get_logger

logger = get_logger(__name__)


class OpenAITransport:
	"""POST ``/chat/completions`` with JSON-object response format.

	Parameters:
		api_key: Bearer token for the API.
		base_url: API root, e.g. ``https://api.openai.com/v1``.
		model: Model name sent with every request.
		timeout_ms: HTTP timeout for the request.
		client: ``httpx.AsyncClient`` shared by every call. The owner
			(normally the TransportPool) closes it.
	"""

	provider = "openai"

	def __init__(
	    self,
	    *,
	    api_key: str,
	    base_url: str,
	    model: str,
	    timeout_ms: int,
	    client: httpx.AsyncClient,
	) -> None:
		self.api_key = api_key
		self.base_url = base_url.rstrip("/")
		self.model = model
		self.timeout_ms = timeout_ms
		self._client = client

	def _payload(self, messages: Sequence[LLMMessage],
	             temperature: float) -> dict[str, Any]:
		return {
		    "model": self.model,
		    "messages": [m.model_dump() for m in messages],
		    "temperature": temperature,
		    "response_format": {
		        "type": "json_object"
		    },
		}

	async def _post(self, payload: dict[str, Any]) -> httpx.Response:
		return await self._client.post(
		    f"{self.base_url}/chat/completions",
		    json=payload,
		    headers={"Authorization": f"Bearer {self.api_key}"},
		    timeout=self.timeout_ms / 1000,
		)

	async def complete(self,
	                   messages: Sequence[LLMMessage],
	                   temperature: float = 0.2) -> LLMResponse:
		started = time.monotonic()
		payload = self._payload(messages, temperature)
		try:
			res = await self._post(payload)
		except httpx.TimeoutException as exc:
			raise TransportError(f"OpenAI request timed out: {exc}",
			                     aborted=True) from exc
		except httpx.HTTPError as exc:
			raise TransportError(f"OpenAI request failed: {exc}",
			                     retryable=True) from exc

		if not res.is_success:
			logger.debug("openai status=%d body=%s", res.status_code,
			             res.text[:500])
			raise TransportError(f"OpenAI error: {res.status_code}",
			                     status=res.status_code)
		try:
			data = res.json()
			content = data["choices"][0]["message"]["content"] or ""
		except (ValueError, KeyError, IndexError, TypeError):
			content = ""
		return LLMResponse(content=content,
		                   latency_ms=int((time.monotonic() - started) * 1000))


__all__ = ["OpenAITransport"]
