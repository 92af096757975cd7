"""LLM backend integrations.

This subpackage provides the transports the orchestration engine calls.

Key modules:
    - openai_http: OpenAI-compatible chat completions over httpx
    - copilot: GitHub Copilot SDK sessions
    - transports: Provider to transport mapping
"""

from mas_heavy.integrations.openai_http import OpenAITransport
from mas_heavy.integrations.copilot import CopilotTransport, flatten_conversation
from mas_heavy.integrations.transports import TransportPool, SUPPORTED_PROVIDERS

__all__ = [
    "OpenAITransport",
    "CopilotTransport",
    "flatten_conversation",
    "TransportPool",
    "SUPPORTED_PROVIDERS",
]
