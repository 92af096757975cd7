"""
Prompt loading utilities.

Provides functions for loading prompt templates from the prompts directory.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from string import Template

# Prompts directory relative to this module
PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts"


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
	"""
	Load a prompt file from the prompts directory.

	Parameters:
		name: Filename of the prompt to load.

	Returns:
		Contents of the prompt file without surrounding whitespace.
	"""
	return (PROMPTS_DIR / name).read_text(encoding="utf-8").strip()


def render_prompt(name: str, **values: str) -> str:
	"""Load a prompt and substitute ``${name}`` placeholders."""
	return Template(load_prompt(name)).safe_substitute(**values)


__all__ = ["load_prompt", "render_prompt", "PROMPTS_DIR"]
