from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from typer.main import get_command

from mas_heavy.core.review import review_patch
from mas_heavy.core.runner import run_orchestration
from mas_heavy.errors import RunFatalError
from mas_heavy.models.config import Config, load_env
from mas_heavy.models.run_params import MIN_AGENTS, OrchestrationInput
from mas_heavy.protocol.server import serve_stdio
from mas_heavy.ui.reporting import print_report, print_review
from mas_heavy.utils.logging import configure_logging

cli = typer.Typer(add_completion=False, no_args_is_help=False)


@cli.callback()
def root() -> None:
	"""
	Root callback for the mas-heavy CLI.

	Without a subcommand the stdio tool server is started.
	"""
	return None


def _setup() -> Config:
	load_env()
	config = Config()
	configure_logging(config.log_level)
	return config


@cli.command()
def serve() -> None:
	"""
	Serve the heavy tools over stdin/stdout.

	Responses are written to stdout; logs go to stderr.
	"""
	config = _setup()
	asyncio.run(serve_stdio(config))


def run_impl(
    prompt: str,
    agents: int = MIN_AGENTS,
    preset: str = "balanced",
    repo_context: Path | None = None,
    max_in_flight: int | None = None,
    timeout_ms: int | None = None,
    trace: bool = True,
    as_json: bool = False,
) -> None:
	"""
	Run one heavy orchestration and print the report.

	Parameters:
		prompt: Task given to every agent.
		agents: Number of agents.
		preset: Role preset name.
		repo_context: File whose contents are passed as repo context.
		max_in_flight: Override for concurrent calls per provider.
		timeout_ms: Override for the per-call timeout.
		trace: Whether to persist a trace record.
		as_json: Print the raw report JSON instead of tables.
	"""
	config = _setup()
	try:
		params = OrchestrationInput(
		    prompt=prompt,
		    n_agents=agents,
		    preset=preset,
		    repo_context=(repo_context.read_text(encoding="utf-8")
		                  if repo_context else None),
		    max_in_flight_per_provider=(max_in_flight
		                                or config.max_in_flight_per_provider),
		    timeout_ms=timeout_ms or config.agent_timeout_ms,
		    trace=trace,
		)
	except ValidationError as exc:
		typer.echo(f"Invalid input: {exc}", err=True)
		raise typer.Exit(code=2)

	try:
		report = asyncio.run(run_orchestration(params, config=config))
	except RunFatalError as exc:
		typer.echo(f"{exc} (trace: {exc.trace_id})", err=True)
		for outcome in exc.outcomes:
			typer.echo(f"  {outcome.agent.id}: {outcome.error}", err=True)
		raise typer.Exit(code=1)
	except ValueError as exc:
		typer.echo(f"Invalid input: {exc}", err=True)
		raise typer.Exit(code=2)

	if as_json:
		typer.echo(json.dumps(report.model_dump(mode="json", by_alias=True),
		                      indent=2))
	else:
		print_report(report)


@cli.command()
def run(
    prompt: str,
    agents: int = typer.Option(MIN_AGENTS, "--agents", "-n",
                               help="Number of agents (4-12)"),
    preset: str = typer.Option("balanced", "--preset",
                               help="balanced, quality, speed or security"),
    repo_context: Optional[Path] = typer.Option(
        None,
        "--repo-context",
        exists=True,
        dir_okay=False,
        help="File passed to agents as repository context",
    ),
    max_in_flight: int = typer.Option(
        None, "--max-in-flight", help="Override concurrent calls per provider"),
    timeout_ms: int = typer.Option(None, "--timeout-ms",
                                   help="Override per-call timeout in ms"),
    trace: bool = typer.Option(True, "--trace/--no-trace",
                               help="Persist a trace record"),
    as_json: bool = typer.Option(False, "--json", help="Print report JSON"),
) -> None:
	"""
	Run N agents on PROMPT, judge them and print the final result.
	"""
	run_impl(prompt, agents, preset, repo_context, max_in_flight, timeout_ms,
	         trace, as_json)


@cli.command()
def review(
    patch_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    criteria: List[str] = typer.Option([], "--criteria", "-c",
                                       help="Extra criteria (repeatable)"),
    as_json: bool = typer.Option(False, "--json", help="Print review JSON"),
) -> None:
	"""
	Review a patch or diff file for common risks.
	"""
	_setup()
	result = review_patch(patch_file.read_text(encoding="utf-8"), criteria)
	if as_json:
		typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
	else:
		print_review(result)


def entrypoint(argv=None, *, standalone_mode: bool = True):
	"""
	Typer entrypoint that defaults to `serve` without arguments.

	Lets tool hosts launch 'mas-heavy' directly as a stdio server.

	Parameters:
		argv: Command-line arguments. Defaults to sys.argv[1:].
		standalone_mode: If True, Click handles exit codes.

	Returns:
		Result of the Click application main invocation.
	"""
	args = sys.argv[1:] if argv is None else list(argv)

	_click_app = get_command(cli)
	if not args:
		args = ["serve"]
	return _click_app.main(
	    args=args,
	    prog_name="mas-heavy",
	    standalone_mode=standalone_mode,
	)


if __name__ == "__main__":
	entrypoint()
