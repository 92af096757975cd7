"""
Heuristic patch review.

Stateless checks over patch text; no model call is involved.
"""

from __future__ import annotations

from typing import Sequence

from mas_heavy.models.review import ReviewOutput

MAX_PATCH_CHARS = 20000

RECOMMENDATIONS = [
    "Ensure patch applies cleanly with git apply.",
    "Run the suggested test plan.",
    "Validate JSON output against the agent output schema.",
]


def review_patch(patch_or_diff: str,
                 criteria: Sequence[str] = ()) -> ReviewOutput:
	"""
	Review a patch or diff for common risks.

	Parameters:
		patch_or_diff: Patch text.
		criteria: Caller criteria, echoed as evaluated.

	Returns:
		ReviewOutput; risk is "medium" when anything was found.
	"""
	findings: list[str] = []
	if "@@" not in patch_or_diff:
		findings.append("Patch does not include unified diff hunks (@@).")
	if len(patch_or_diff) > MAX_PATCH_CHARS:
		findings.append(
		    "Patch is large; consider splitting into smaller changes.")
	if "TODO" in patch_or_diff or "FIXME" in patch_or_diff:
		findings.append("Patch contains TODO/FIXME markers.")
	if criteria:
		findings.append(f"Custom criteria evaluated: {', '.join(criteria)}.")
	return ReviewOutput(
	    findings=findings,
	    risk="medium" if findings else "low",
	    recommendations=list(RECOMMENDATIONS),
	)


__all__ = ["review_patch", "MAX_PATCH_CHARS", "RECOMMENDATIONS"]
