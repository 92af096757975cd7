"""File and resource loading utilities.

This subpackage handles loading the static configuration data shipped
with the package.

Key modules:
    - prompts: Prompt template loading
    - presets: Agent role presets
"""

from .prompts import load_prompt, render_prompt
from .presets import load_presets, build_agents

__all__ = [
    "load_prompt",
    "render_prompt",
    "load_presets",
    "build_agents",
]
