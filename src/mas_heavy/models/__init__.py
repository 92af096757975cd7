"""
mas-heavy models.

This subpackage contains Pydantic models for configuration, agent
specifications, candidates, outcomes, judge verdicts and run reports.

Key models:
    - Config: Application configuration loaded from environment
    - AgentSpec: One agent's role/provider/model/temperature
    - AgentCandidate: Validated structured agent output
    - AgentSuccess / AgentFailure: Per-agent outcome variants
    - JudgeVerdict: Scores and the chosen candidate
    - RunReport: What an orchestration call returns
"""

from .config import Config, load_env
from .agent_spec import AgentSpec, assign_ids
from .candidate import AgentCandidate, parse_candidate
from .outcome import AgentOutcome, AgentSuccess, AgentFailure
from .judge_result import Score, JudgeVerdict
from .final_result import FinalResult
from .report import AgentSummary, RunReport
from .messages import LLMMessage, LLMResponse
from .run_params import OrchestrationInput, ReviewInput
from .review import ReviewOutput
from .trace import TraceRecord

__all__ = [
    "Config",
    "load_env",
    "AgentSpec",
    "assign_ids",
    "AgentCandidate",
    "parse_candidate",
    "AgentOutcome",
    "AgentSuccess",
    "AgentFailure",
    "Score",
    "JudgeVerdict",
    "FinalResult",
    "AgentSummary",
    "RunReport",
    "LLMMessage",
    "LLMResponse",
    "OrchestrationInput",
    "ReviewInput",
    "ReviewOutput",
    "TraceRecord",
]
