"""
JSON-RPC tool server over a Content-Length framed byte stream.

A reader task keeps draining the input stream into a queue while a
single dispatcher handles one request at a time, so a long orchestration
call never stalls the transport.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import sys
from typing import Any, Awaitable, BinaryIO, Callable, Optional

from pydantic import ValidationError

from mas_heavy import __version__
from mas_heavy.core.review import review_patch
from mas_heavy.core.runner import (
    TransportFactory,
    resolve_agents,
    run_orchestration,
)
from mas_heavy.core.scheduler import ConcurrencyScheduler
from mas_heavy.errors import RunFatalError
from mas_heavy.models.config import Config
from mas_heavy.models.run_params import OrchestrationInput, ReviewInput
from mas_heavy.protocol.framing import (
    DecodedItem,
    Frame,
    FrameDecoder,
    encode_message,
)
from mas_heavy.protocol.tools import (
    HEAVY_REVIEW,
    HEAVY_VIBE,
    TOOL_INPUTS,
    tool_definitions,
)
from mas_heavy.utils.logging import get_logger

logger = get_logger(__name__)

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "mas-heavy"

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
APPLICATION_ERROR = -32000

READ_CHUNK = 64 * 1024


class RpcError(Exception):
	"""An error that becomes a framed JSON-RPC error response."""

	def __init__(self, code: int, message: str,
	             data: Optional[dict[str, Any]] = None) -> None:
		super().__init__(message)
		self.code = code
		self.message = message
		self.data = data


def error_response(req_id: Any, code: int, message: str,
                   data: Optional[dict[str, Any]] = None) -> dict[str, Any]:
	error: dict[str, Any] = {"code": code, "message": message}
	if data:
		error["data"] = data
	return {"jsonrpc": JSONRPC_VERSION, "id": req_id, "error": error}


def result_response(req_id: Any, result: Any) -> dict[str, Any]:
	return {"jsonrpc": JSONRPC_VERSION, "id": req_id, "result": result}


class ProtocolServer:
	"""
	Serve the heavy tools to one connected client.

	Parameters:
		config: Application configuration.
		reader: Source of framed request bytes.
		writer: Binary sink for framed responses.
		scheduler: Scheduler shared by every run on this connection.
		transport_factory: Overrides the transport used by agents.
	"""

	def __init__(
	    self,
	    config: Config,
	    reader: asyncio.StreamReader,
	    writer: BinaryIO,
	    scheduler: ConcurrencyScheduler | None = None,
	    transport_factory: TransportFactory | None = None,
	) -> None:
		self.config = config
		self.reader = reader
		self.writer = writer
		self.scheduler = scheduler or ConcurrencyScheduler()
		self.transport_factory = transport_factory
		self._decoder = FrameDecoder()
		self._handlers: dict[str, Callable[[Any], Awaitable[Any]]] = {
		    "initialize": self._initialize,
		    "ping": self._ping,
		    "tools/list": self._tools_list,
		    "tools/call": self._tools_call,
		}

	def send(self, message: dict[str, Any]) -> None:
		self.writer.write(encode_message(message))
		self.writer.flush()

	async def _read_loop(self, queue: asyncio.Queue) -> None:
		try:
			while True:
				chunk = await self.reader.read(READ_CHUNK)
				if not chunk:
					logger.debug("input stream closed")
					break
				for item in self._decoder.feed(chunk):
					queue.put_nowait(item)
		except (ConnectionError, OSError) as exc:
			logger.warning("input stream error: %s", exc)
		finally:
			queue.put_nowait(None)

	async def serve(self) -> None:
		"""Handle requests until the input stream reaches EOF."""
		queue: asyncio.Queue[DecodedItem | None] = asyncio.Queue()
		reader_task = asyncio.create_task(self._read_loop(queue))
		logger.info("protocol server ready")
		try:
			while True:
				item = await queue.get()
				if item is None:
					break
				await self.handle_item(item)
		finally:
			reader_task.cancel()
			with contextlib.suppress(asyncio.CancelledError):
				await reader_task
		logger.info("protocol server stopped")

	async def handle_item(self, item: DecodedItem) -> None:
		"""Respond to one decoded frame (or framing error)."""
		if not isinstance(item, Frame):
			logger.warning("framing error: %s", item.message)
			self.send(error_response(None, PARSE_ERROR, "Parse error"))
			return
		try:
			message = json.loads(item.body.decode("utf-8"))
		except (UnicodeDecodeError, json.JSONDecodeError) as exc:
			logger.warning("unparseable request body: %s", exc)
			self.send(error_response(None, PARSE_ERROR, "Parse error"))
			return
		response = await self.handle_message(message)
		if response is not None:
			self.send(response)

	async def handle_message(self, message: Any) -> dict[str, Any] | None:
		"""
		Dispatch one decoded request.

		Returns:
			The response object, or None for notifications.
		"""
		if not isinstance(message, dict) or not isinstance(
		    message.get("method"), str):
			req_id = message.get("id") if isinstance(message, dict) else None
			return error_response(req_id, PARSE_ERROR, "Parse error")

		method = message["method"]
		req_id = message.get("id")
		if "id" not in message and method.startswith("notifications/"):
			logger.debug("notification %s", method)
			return None

		handler = self._handlers.get(method)
		try:
			if handler is None:
				raise RpcError(METHOD_NOT_FOUND, "Method not found")
			result = await handler(message.get("params"))
		except RpcError as exc:
			return error_response(req_id, exc.code, exc.message, exc.data)
		except Exception as exc:
			logger.exception("request %s (%s) failed", req_id, method)
			return error_response(req_id, APPLICATION_ERROR, str(exc))
		return result_response(req_id, result)

	async def _initialize(self, params: Any) -> dict[str, Any]:
		return {
		    "protocolVersion": PROTOCOL_VERSION,
		    "serverInfo": {
		        "name": SERVER_NAME,
		        "version": __version__
		    },
		    "capabilities": {
		        "tools": {}
		    },
		}

	async def _ping(self, params: Any) -> dict[str, Any]:
		return {}

	async def _tools_list(self, params: Any) -> dict[str, Any]:
		return {"tools": tool_definitions()}

	async def _tools_call(self, params: Any) -> Any:
		if not isinstance(params, dict) or not params.get("name"):
			raise RpcError(INVALID_PARAMS, "Invalid params")
		name = params["name"]
		model = TOOL_INPUTS.get(name)
		if model is None:
			raise RpcError(METHOD_NOT_FOUND, f"Method not found: {name}")
		try:
			parsed = model.model_validate(params.get("arguments") or {})
		except ValidationError as exc:
			raise RpcError(INVALID_PARAMS, f"Invalid params: {exc}") from exc
		logger.info("tools/call %s", name)
		if name == HEAVY_VIBE:
			return await self._heavy_vibe(parsed)
		if name == HEAVY_REVIEW:
			return self._heavy_review(parsed)
		raise RpcError(METHOD_NOT_FOUND, f"Method not found: {name}")

	def _apply_config_defaults(
	        self, params: OrchestrationInput) -> OrchestrationInput:
		"""Fill limits the caller left out from the server configuration."""
		update: dict[str, Any] = {}
		if "max_in_flight_per_provider" not in params.model_fields_set:
			update["max_in_flight_per_provider"] = (
			    self.config.max_in_flight_per_provider)
		if "timeout_ms" not in params.model_fields_set:
			update["timeout_ms"] = self.config.agent_timeout_ms
		return params.model_copy(update=update) if update else params

	async def _heavy_vibe(self, params: OrchestrationInput) -> dict[str, Any]:
		params = self._apply_config_defaults(params)
		try:
			resolve_agents(params, self.config)
		except ValueError as exc:
			raise RpcError(INVALID_PARAMS, f"Invalid params: {exc}") from exc
		try:
			report = await run_orchestration(
			    params,
			    config=self.config,
			    scheduler=self.scheduler,
			    transport_factory=self.transport_factory,
			)
		except RunFatalError as exc:
			data = {"traceId": exc.trace_id} if exc.trace_id else None
			raise RpcError(APPLICATION_ERROR, str(exc), data) from exc
		return report.model_dump(mode="json", by_alias=True)

	def _heavy_review(self, params: ReviewInput) -> dict[str, Any]:
		return review_patch(params.patch_or_diff,
		                    params.criteria).model_dump(mode="json")


async def serve_stdio(config: Config) -> None:
	"""Run a ProtocolServer on this process's stdin and stdout."""
	loop = asyncio.get_running_loop()
	reader = asyncio.StreamReader()
	await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader),
	                             sys.stdin)
	server = ProtocolServer(config, reader, sys.stdout.buffer)
	await server.serve()


__all__ = [
    "ProtocolServer",
    "RpcError",
    "serve_stdio",
    "PARSE_ERROR",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "APPLICATION_ERROR",
    "PROTOCOL_VERSION",
]
