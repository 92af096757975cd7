"""Merge the judged best candidate into the final deliverable."""

from __future__ import annotations

from mas_heavy.models.candidate import AgentCandidate
from mas_heavy.models.final_result import FinalResult
from mas_heavy.models.judge_result import JudgeVerdict

ROLLBACK = ("Revert the applied patch or restore the prior state "
            "(e.g. checkout the previous commit).")


def synthesize(best: AgentCandidate, verdict: JudgeVerdict) -> FinalResult:
	return FinalResult(
	    plan=f"{best.plan}\n\nImprovements: {verdict.improvements}",
	    patch=best.patch,
	    test_plan=best.test_plan,
	    risks=best.risks,
	    rollback=ROLLBACK,
	    confidence=best.confidence,
	)


__all__ = ["synthesize", "ROLLBACK"]
