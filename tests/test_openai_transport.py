import json

import httpx
import pytest

from mas_heavy.errors import TransportError
from mas_heavy.integrations.openai_http import OpenAITransport
from mas_heavy.models.messages import LLMMessage

MESSAGES = [
    LLMMessage(role="system", content="sys"),
    LLMMessage(role="user", content="hi"),
]


def _transport(handler):
	client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
	return OpenAITransport(api_key="sk-test-key", base_url="https://api.x/v1/",
	                       model="gpt-test", timeout_ms=1000, client=client)


@pytest.mark.asyncio
async def test_request_shape_and_content():
	seen = {}

	def handler(request):
		seen["url"] = str(request.url)
		seen["auth"] = request.headers["authorization"]
		seen["body"] = json.loads(request.content)
		return httpx.Response(
		    200, json={"choices": [{
		        "message": {
		            "content": "{\"a\": 1}"
		        }
		    }]})

	res = await _transport(handler).complete(MESSAGES, 0.3)
	assert res.content == "{\"a\": 1}"
	assert seen["url"] == "https://api.x/v1/chat/completions"
	assert seen["auth"] == "Bearer sk-test-key"
	body = seen["body"]
	assert body["model"] == "gpt-test"
	assert body["temperature"] == 0.3
	assert body["response_format"] == {"type": "json_object"}
	assert body["messages"] == [{
	    "role": "system",
	    "content": "sys"
	}, {
	    "role": "user",
	    "content": "hi"
	}]


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 429, 500])
async def test_error_status_carried(status):
	transport = _transport(lambda request: httpx.Response(status, text="no"))
	with pytest.raises(TransportError) as excinfo:
		await transport.complete(MESSAGES)
	assert excinfo.value.status == status
	assert str(excinfo.value) == f"OpenAI error: {status}"


@pytest.mark.asyncio
async def test_malformed_body_yields_empty_content():
	transport = _transport(lambda request: httpx.Response(200, text="oops"))
	res = await transport.complete(MESSAGES)
	assert res.content == ""


@pytest.mark.asyncio
async def test_timeout_is_aborted():

	def handler(request):
		raise httpx.ReadTimeout("slow", request=request)

	with pytest.raises(TransportError) as excinfo:
		await _transport(handler).complete(MESSAGES)
	assert excinfo.value.aborted


@pytest.mark.asyncio
async def test_connection_error_is_retryable():

	def handler(request):
		raise httpx.ConnectError("refused", request=request)

	with pytest.raises(TransportError) as excinfo:
		await _transport(handler).complete(MESSAGES)
	assert excinfo.value.retryable
	assert excinfo.value.status is None
