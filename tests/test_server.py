import asyncio
import io
import json

import pytest

from mas_heavy import __version__
from mas_heavy.core.scheduler import ConcurrencyScheduler
from mas_heavy.errors import TransportError
from mas_heavy.models.config import Config
from mas_heavy.models.messages import LLMResponse
from mas_heavy.protocol.framing import FrameDecoder, encode_message
from mas_heavy.protocol.server import (
    APPLICATION_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    ProtocolServer,
)

VALID = json.dumps({
    "plan": "Plan",
    "patch": "diff --git a/file b/file\n@@\n+change",
    "test_plan": "echo test",
    "risks": "Low",
    "assumptions": "None",
    "confidence": 0.7,
})


class StaticTransport:

	def __init__(self, content=VALID, error=None):
		self.content = content
		self.error = error

	async def complete(self, messages, temperature=0.2):
		if self.error:
			raise self.error
		return LLMResponse(content=self.content)


@pytest.fixture
def cfg(tmp_path):
	return Config(TRACE_DIR=str(tmp_path / "traces"), OPENAI_MODEL="mock")


def _req(method, req_id=1, params=None):
	msg = {"jsonrpc": "2.0", "id": req_id, "method": method}
	if params is not None:
		msg["params"] = params
	return encode_message(msg)


async def _serve(cfg, data, **kwargs):
	reader = asyncio.StreamReader()
	reader.feed_data(data)
	reader.feed_eof()
	out = io.BytesIO()
	server = ProtocolServer(cfg, reader, out, **kwargs)
	await server.serve()
	return [json.loads(item.body) for item in FrameDecoder().feed(out.getvalue())]


def _vibe_args(n=4, **extra):
	args = {"prompt": "Test", "nAgents": n, "trace": False}
	args.update(extra)
	return {"name": "heavy_vibe", "arguments": args}


@pytest.mark.asyncio
async def test_initialize(cfg):
	[resp] = await _serve(cfg, _req("initialize", params={}))
	assert resp["id"] == 1
	assert resp["result"]["protocolVersion"] == "2024-11-05"
	assert resp["result"]["serverInfo"] == {
	    "name": "mas-heavy",
	    "version": __version__
	}
	assert resp["result"]["capabilities"] == {"tools": {}}


@pytest.mark.asyncio
async def test_tools_list(cfg):
	[resp] = await _serve(cfg, _req("tools/list"))
	tools = {t["name"]: t for t in resp["result"]["tools"]}
	assert set(tools) == {"heavy_vibe", "heavy_review"}
	vibe_props = tools["heavy_vibe"]["inputSchema"]["properties"]
	assert "nAgents" in vibe_props
	assert vibe_props["nAgents"]["minimum"] == 4
	assert vibe_props["nAgents"]["maximum"] == 12
	assert "patchOrDiff" in tools["heavy_review"]["inputSchema"]["properties"]


@pytest.mark.asyncio
async def test_ping_and_unknown_method(cfg):
	responses = await _serve(cfg, _req("ping", 1) + _req("bogus", 2))
	assert responses[0] == {"jsonrpc": "2.0", "id": 1, "result": {}}
	assert responses[1]["id"] == 2
	assert responses[1]["error"]["code"] == METHOD_NOT_FOUND


@pytest.mark.asyncio
async def test_notifications_get_no_response(cfg):
	note = encode_message({
	    "jsonrpc": "2.0",
	    "method": "notifications/initialized"
	})
	responses = await _serve(cfg, note + _req("ping", 5))
	assert [r["id"] for r in responses] == [5]


@pytest.mark.asyncio
async def test_malformed_body_is_parse_error_and_loop_continues(cfg):
	bad = b"Content-Length: 5\r\n\r\n{oops"
	responses = await _serve(cfg, bad + _req("ping", 9))
	assert responses[0]["id"] is None
	assert responses[0]["error"]["code"] == PARSE_ERROR
	assert responses[1]["id"] == 9
	assert "result" in responses[1]


@pytest.mark.asyncio
async def test_missing_content_length_is_parse_error(cfg):
	responses = await _serve(cfg, b"X-Foo: 1\r\n\r\n" + _req("ping", 3))
	assert responses[0]["error"]["code"] == PARSE_ERROR
	assert responses[0]["id"] is None
	assert responses[1]["id"] == 3


@pytest.mark.asyncio
async def test_non_request_body_is_parse_error(cfg):
	responses = await _serve(cfg, encode_message([1, 2]) +
	                         encode_message({"id": 4}))
	assert [r["error"]["code"] for r in responses] == [PARSE_ERROR] * 2
	assert responses[0]["id"] is None
	assert responses[1]["id"] == 4


@pytest.mark.asyncio
async def test_tools_call_requires_name(cfg):
	[resp] = await _serve(cfg, _req("tools/call", params={"arguments": {}}))
	assert resp["error"]["code"] == INVALID_PARAMS


@pytest.mark.asyncio
async def test_unknown_tool(cfg):
	[resp] = await _serve(cfg, _req("tools/call", params={"name": "nope"}))
	assert resp["error"]["code"] == METHOD_NOT_FOUND


@pytest.mark.asyncio
async def test_heavy_review(cfg):
	params = {
	    "name": "heavy_review",
	    "arguments": {
	        "patchOrDiff": "no hunks here",
	        "criteria": ["style"]
	    },
	}
	[resp] = await _serve(cfg, _req("tools/call", params=params))
	result = resp["result"]
	assert result["risk"] == "medium"
	assert "Patch does not include unified diff hunks (@@)." in result[
	    "findings"]
	assert "Custom criteria evaluated: style." in result["findings"]


@pytest.mark.asyncio
async def test_heavy_review_invalid_args(cfg):
	params = {"name": "heavy_review", "arguments": {"criteria": []}}
	[resp] = await _serve(cfg, _req("tools/call", params=params))
	assert resp["error"]["code"] == INVALID_PARAMS


@pytest.mark.asyncio
@pytest.mark.parametrize("n", [3, 13])
async def test_heavy_vibe_rejects_agent_count(cfg, n):
	calls = []

	def factory(spec, timeout_ms):
		calls.append(spec)
		return StaticTransport()

	[resp] = await _serve(cfg, _req("tools/call", params=_vibe_args(n)),
	                      transport_factory=factory)
	assert resp["error"]["code"] == INVALID_PARAMS
	assert calls == []


@pytest.mark.asyncio
async def test_heavy_vibe_duplicate_ids_are_invalid_params(cfg):
	agents = [{
	    "id": "same",
	    "role": "r",
	    "provider": "openai",
	    "model": "m"
	} for _ in range(4)]
	[resp] = await _serve(
	    cfg, _req("tools/call", params=_vibe_args(4, agents=agents)),
	    transport_factory=lambda spec, timeout_ms: StaticTransport())
	assert resp["error"]["code"] == INVALID_PARAMS
	assert "duplicate agent id" in resp["error"]["message"]


@pytest.mark.asyncio
async def test_heavy_vibe_success(cfg):
	[resp] = await _serve(
	    cfg, _req("tools/call", 11, params=_vibe_args(4)),
	    transport_factory=lambda spec, timeout_ms: StaticTransport())
	assert resp["id"] == 11
	result = resp["result"]
	assert len(result["agents"]) == 4
	assert result["agents"][0]["latencyMs"] >= 0
	assert "diff --git" in result["final"]["patch"]
	assert result["judge"]["bestIndex"] == 0
	assert result["traceId"]


@pytest.mark.asyncio
async def test_heavy_vibe_all_failed_is_application_error(cfg):
	fatal = TransportError("Fatal", status=400)
	[resp] = await _serve(
	    cfg, _req("tools/call", params=_vibe_args(4)),
	    transport_factory=lambda spec, timeout_ms: StaticTransport(error=fatal))
	assert resp["error"]["code"] == APPLICATION_ERROR
	assert resp["error"]["message"] == "All agents failed. See trace for details."
	assert resp["error"]["data"]["traceId"]


@pytest.mark.asyncio
async def test_config_limits_apply_when_arguments_omit_them(tmp_path):
	cfg = Config(TRACE_DIR=str(tmp_path), OPENAI_MODEL="mock",
	             MAX_IN_FLIGHT_PER_PROVIDER=1, AGENT_TIMEOUT_MS=1234)
	seen = []

	def factory(spec, timeout_ms):
		seen.append(timeout_ms)
		return StaticTransport()

	scheduler = ConcurrencyScheduler()
	await _serve(cfg, _req("tools/call", params=_vibe_args(4)),
	             scheduler=scheduler, transport_factory=factory)
	assert seen == [1234] * 4
	assert scheduler.limiter_for("openai", 1).peak_in_flight == 1


@pytest.mark.asyncio
async def test_responses_follow_request_order(cfg):
	data = (_req("tools/call", 1, params=_vibe_args(4)) + _req("ping", 2) +
	        _req("tools/list", 3))
	responses = await _serve(
	    cfg, data, transport_factory=lambda spec, timeout_ms: StaticTransport())
	assert [r["id"] for r in responses] == [1, 2, 3]
