"""
Console rendering of run reports.

Used by the CLI only; the protocol server returns reports as JSON.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from mas_heavy.models.report import RunReport
from mas_heavy.models.review import ReviewOutput


def agents_table(report: RunReport) -> Table:
	"""One row per agent with status, latency and summary."""
	table = Table(title="Agents", box=box.ROUNDED, expand=True,
	              title_style="bold cyan")
	table.add_column("Agent", style="bold")
	table.add_column("Role")
	table.add_column("Provider")
	table.add_column("Model")
	table.add_column("Latency", justify="right")
	table.add_column("Status")
	table.add_column("Summary")
	for agent in report.agents:
		style = "green" if agent.status == "ok" else "red"
		table.add_row(
		    Text(agent.id),
		    Text(agent.role),
		    Text(agent.provider),
		    Text(agent.model),
		    f"{agent.latency_ms}ms",
		    Text(agent.status, style=style),
		    Text(agent.summary),
		)
	return table


def judge_table(report: RunReport) -> Table:
	"""Scores of the successful candidates; the winner is highlighted."""
	table = Table(title="Judge Decision", box=box.ROUNDED, expand=True,
	              title_style="bold yellow")
	table.add_column("Candidate", style="bold")
	table.add_column("Accuracy", justify="right")
	table.add_column("Executability", justify="right")
	table.add_column("Risk", justify="right")
	table.add_column("Testability", justify="right")
	table.add_column("Total", justify="right")
	for i, score in enumerate(report.judge.scores):
		style = "bold green" if i == report.judge.best_index else None
		table.add_row(
		    str(i),
		    f"{score.accuracy:.1f}",
		    f"{score.executability:.1f}",
		    f"{score.risk:.1f}",
		    f"{score.testability:.1f}",
		    f"{score.total:.1f}",
		    style=style,
		)
	return table


def final_table(report: RunReport) -> Table:
	"""Fields of the synthesized final result."""
	table = Table(title="Final Result", box=box.ROUNDED, show_header=False,
	              expand=True, title_style="bold cyan")
	table.add_column("Field", style="bold")
	table.add_column("Value")
	final = report.final
	table.add_row("Plan", Text(final.plan))
	table.add_row("Test Plan", Text(final.test_plan))
	table.add_row("Risks", Text(final.risks))
	table.add_row("Rollback", Text(final.rollback))
	table.add_row("Confidence", f"{final.confidence:.2f}")
	return table


def print_report(report: RunReport, console: Console | None = None) -> None:
	"""Print a run report as rich tables followed by the patch."""
	console = console or Console()
	console.print(agents_table(report))
	console.print(judge_table(report))
	console.print(Text(report.judge.rationale, style="dim"))
	console.print(final_table(report))
	if report.final.patch:
		console.print("\n[bold]Patch[/bold]")
		console.print(report.final.patch, markup=False, highlight=False)
	console.print(Text(f"\ntrace: {report.trace_id}", style="dim"))


def print_review(review: ReviewOutput, console: Console | None = None) -> None:
	"""Print patch review findings."""
	console = console or Console()
	style = "green" if review.risk == "low" else "yellow"
	console.print(Text(f"risk: {review.risk}", style=f"bold {style}"))
	if review.findings:
		console.print("\n[bold]Findings[/bold]")
		for finding in review.findings:
			console.print(f"  • {finding}", markup=False)
	console.print("\n[bold]Recommendations[/bold]")
	for rec in review.recommendations:
		console.print(f"  • {rec}", markup=False)


__all__ = [
    "agents_table",
    "judge_table",
    "final_table",
    "print_report",
    "print_review",
]
