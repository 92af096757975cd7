"""
Deterministic candidate judge.

Scores each successful candidate on four axes and selects the highest
total, keeping the earliest candidate on ties.
"""

from __future__ import annotations

from typing import Sequence

from mas_heavy.models.candidate import AgentCandidate
from mas_heavy.models.judge_result import JudgeVerdict, Score

IMPROVEMENTS = (
    "Improve patch clarity, ensure test plan commands are executable, "
    "and reduce risk exposure by adding rollback steps.")

# Characters of risk narrative per point deducted from the risk axis.
RISK_CHARS_PER_POINT = 40


def clamp_score(value: float) -> float:
	return max(0.0, min(10.0, value))


def score_candidate(candidate: AgentCandidate) -> Score:
	"""Score one candidate."""
	return Score(
	    accuracy=clamp_score(candidate.confidence * 10),
	    executability=clamp_score(8 if candidate.patch.strip() else 4),
	    risk=clamp_score(
	        10 - min(len(candidate.risks) / RISK_CHARS_PER_POINT, 10)),
	    testability=clamp_score(8 if candidate.test_plan.strip() else 3),
	)


def score_candidates(candidates: Sequence[AgentCandidate]) -> JudgeVerdict:
	"""
	Score candidates and pick the best one.

	Parameters:
		candidates: Successful candidates in outcome order.

	Returns:
		JudgeVerdict with scores index-aligned to ``candidates``.

	Raises:
		ValueError: If there are no candidates.
	"""
	if not candidates:
		raise ValueError("judge requires at least one candidate")
	scores = [score_candidate(c) for c in candidates]
	best_index = 0
	for index, score in enumerate(scores):
		if score.total > scores[best_index].total:
			best_index = index
	return JudgeVerdict(
	    scores=scores,
	    best_index=best_index,
	    rationale=f"Selected candidate {best_index} based on highest total score.",
	    improvements=IMPROVEMENTS,
	)


__all__ = ["score_candidates", "score_candidate", "clamp_score", "IMPROVEMENTS"]
