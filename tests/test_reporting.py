import io

from rich.console import Console

from mas_heavy.core.judge import score_candidates
from mas_heavy.core.synthesizer import synthesize
from mas_heavy.models.agent_spec import AgentSpec
from mas_heavy.models.candidate import AgentCandidate
from mas_heavy.models.outcome import AgentFailure, AgentSuccess
from mas_heavy.models.report import AgentSummary, RunReport
from mas_heavy.models.review import ReviewOutput
from mas_heavy.ui.reporting import (
    agents_table,
    judge_table,
    print_report,
    print_review,
)


def _report(plan="Plan A", risks="r", error="Fatal"):
	candidate = AgentCandidate(plan=plan, patch="@@ -1 +1 @@\n-a\n+b",
	                           test_plan="pytest", risks=risks, assumptions="a",
	                           confidence=0.7)
	verdict = score_candidates([candidate])
	ok = AgentSpec(id="agent-1", role="planner", provider="openai", model="m")
	bad = AgentSpec(id="agent-2", role="tester", provider="openai", model="m")
	return RunReport(
	    trace_id="trace-xyz",
	    agents=[
	        AgentSummary.from_outcome(
	            AgentSuccess(agent=ok, candidate=candidate, latency_ms=10)),
	        AgentSummary.from_outcome(
	            AgentFailure(agent=bad, error=error, latency_ms=3)),
	    ],
	    judge=verdict,
	    final=synthesize(candidate, verdict),
	)


def _console():
	return Console(file=io.StringIO(), width=200, color_system=None)


def test_tables_have_one_row_per_entry():
	report = _report()
	assert agents_table(report).row_count == 2
	assert judge_table(report).row_count == 1


def test_print_report():
	console = _console()
	print_report(_report(), console)
	out = console.file.getvalue()
	assert "agent-1" in out
	assert "Fatal" in out
	assert "Final Result" in out
	assert "@@ -1 +1 @@" in out
	assert "trace: trace-xyz" in out


def test_print_review():
	console = _console()
	print_review(
	    ReviewOutput(findings=["Patch contains TODO/FIXME markers."],
	                 risk="medium", recommendations=["Run tests."]), console)
	out = console.file.getvalue()
	assert "risk: medium" in out
	assert "Patch contains TODO/FIXME markers." in out
	assert "Run tests." in out


def test_print_report_with_bracketed_text():
	console = _console()
	report = _report(plan="Use list[/int] slicing", risks="[bold]none",
	                 error="OpenAI error: [/red] 500")
	print_report(report, console)
	out = console.file.getvalue()
	assert "Use list[/int] slicing" in out
	assert "[bold]none" in out
	assert "OpenAI error: [/red] 500" in out
