"""
Transport message models.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LLMMessage(BaseModel):
	"""One chat turn sent to a transport."""

	role: Literal["system", "user", "assistant"]
	content: str


class LLMResponse(BaseModel):
	"""Text returned by a transport with the call latency."""

	content: str
	latency_ms: int = Field(default=0, ge=0)


__all__ = ["LLMMessage", "LLMResponse"]
