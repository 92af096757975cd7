"""
Filesystem helpers for bundled assets and trace output.
"""

from __future__ import annotations

from pathlib import Path

# Root of the installed mas_heavy package.
PACKAGE_DIR: Path = Path(__file__).resolve().parents[1]


def resolve_asset_path(name: str | Path) -> Path:
	"""Return ``name`` if it exists, otherwise the bundled asset of that name.

	Lets callers point at their own preset or prompt files while the
	defaults ship inside the package.
	"""
	candidate = Path(name)
	if candidate.exists():
		return candidate
	return PACKAGE_DIR / candidate


def ensure_within(base: Path, path: Path) -> Path:
	"""
	Return ``path`` unchanged when it resolves inside ``base``.

	Neither path has to exist yet.

	Raises:
		ValueError: If ``path`` resolves outside ``base``.
	"""
	root = base.resolve()
	target = path.resolve()
	if target != root and root not in target.parents:
		raise ValueError(f"{target} is outside {root}")
	return path


__all__ = ["ensure_within", "resolve_asset_path", "PACKAGE_DIR"]
