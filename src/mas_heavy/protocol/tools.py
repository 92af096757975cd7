"""
Tool definitions advertised by the protocol server.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from mas_heavy.models.run_params import OrchestrationInput, ReviewInput

HEAVY_VIBE = "heavy_vibe"
HEAVY_REVIEW = "heavy_review"

TOOL_INPUTS: dict[str, type[BaseModel]] = {
    HEAVY_VIBE: OrchestrationInput,
    HEAVY_REVIEW: ReviewInput,
}

TOOL_DESCRIPTIONS = {
    HEAVY_VIBE: "Run Real MAS heavy engine with parallel agents.",
    HEAVY_REVIEW: "Review a patch or diff for risks.",
}


def tool_definitions() -> list[dict[str, Any]]:
	"""Return the tools/list payload entries."""
	return [{
	    "name": name,
	    "description": TOOL_DESCRIPTIONS[name],
	    "inputSchema": model.model_json_schema(by_alias=True),
	} for name, model in TOOL_INPUTS.items()]


__all__ = [
    "tool_definitions",
    "TOOL_INPUTS",
    "HEAVY_VIBE",
    "HEAVY_REVIEW",
]
