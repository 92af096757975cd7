"""
Agent preset loader.

Presets are static role tables shipped as YAML; build_agents() expands
one of them into exactly ``n_agents`` AgentSpecs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from mas_heavy.models.agent_spec import AgentSpec
from mas_heavy.utils.paths import resolve_asset_path

DEFAULT_PRESETS_FILE = "presets/presets.yaml"


def load_presets(path: str | Path | None = None) -> dict[str, list[dict[str, Any]]]:
	"""
	Load the preset table.

	Parameters:
		path: Preset YAML file; defaults to the bundled table.

	Returns:
		Mapping of preset name to its list of agent templates.

	Raises:
		ValueError: If the file is not a mapping of lists.
	"""
	p = Path(path) if path else resolve_asset_path(DEFAULT_PRESETS_FILE)
	data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
	if not isinstance(data, dict) or not all(
	    isinstance(v, list) and v for v in data.values()):
		raise ValueError(f"invalid preset file: {p}")
	return data


def build_agents(
    preset: str,
    n_agents: int,
    default_model: str,
    presets: dict[str, list[dict[str, Any]]] | None = None,
) -> list[AgentSpec]:
	"""
	Expand a preset into ``n_agents`` specs.

	Templates are reused round-robin; ids are ``<preset>-<n>``.

	Parameters:
		preset: Preset name.
		n_agents: Number of agents to build.
		default_model: Model for templates that do not name one.
		presets: Preloaded preset table (defaults to the bundled one).

	Returns:
		List of AgentSpec in preset order.

	Raises:
		ValueError: If the preset is unknown.
	"""
	table = presets if presets is not None else load_presets()
	if preset not in table:
		raise ValueError(f"unknown preset: {preset}")
	base = table[preset]
	agents: list[AgentSpec] = []
	for index in range(n_agents):
		template = dict(base[index % len(base)])
		template.setdefault("model", default_model)
		template["id"] = f"{preset}-{index + 1}"
		agents.append(AgentSpec(**template))
	return agents


__all__ = ["load_presets", "build_agents", "DEFAULT_PRESETS_FILE"]
