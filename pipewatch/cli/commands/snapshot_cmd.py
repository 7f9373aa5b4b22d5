"""``pipewatch snapshot`` — run one refresh cycle and print the result.

Prints the summary table, any pipelines that could not be fetched, and
optionally the per-action breakdown of one pipeline.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from pipewatch.bridge.codepipeline import CodePipelineClient
from pipewatch.cli.commands import load_config
from pipewatch.core.fetcher import PipelineFetcher
from pipewatch.core.refresh_loop import RefreshLoop
from pipewatch.logging_config import configure_logging
from pipewatch.monitor.aggregator import build_rows
from pipewatch.monitor.renderer import detail_panel, summary_table
from pipewatch.monitor.state import DashboardState

console = Console()


def snapshot_cmd(
    pattern: Optional[str] = typer.Option(
        None,
        "--pattern",
        "-p",
        help="Regex (case-insensitive) selecting watched pipelines.",
    ),
    detail: Optional[str] = typer.Option(
        None,
        "--detail",
        "-d",
        help="Also show the action breakdown of this pipeline (name prefix).",
    ),
    region: Optional[str] = typer.Option(None, "--region", help="AWS region."),
    profile: Optional[str] = typer.Option(None, "--profile", help="AWS profile."),
) -> None:
    """Fetch the watched pipelines once and print their status."""
    config = load_config(pattern=pattern, region=region, profile=profile)
    configure_logging(config.log_level)

    client = CodePipelineClient(
        config.aws_region,
        config.aws_profile,
        timeout=config.detail_timeout_seconds,
    )
    state = DashboardState()
    loop = RefreshLoop(
        PipelineFetcher.from_config(config, client),
        state,
        name_width=config.name_width,
        strict=config.strict,
    )

    if not asyncio.run(loop.run_cycle()):
        console.print(f"[bold red]Refresh failed:[/bold red] {loop.last_error}")
        raise typer.Exit(code=1)

    console.print(summary_table(build_rows(state.snapshots, config.name_width)))

    failures = loop.last_result.failures if loop.last_result else {}
    for name, reason in failures.items():
        console.print(f"[yellow]Unavailable:[/yellow] {name} [dim]({reason})[/dim]")

    if detail:
        snapshot = state.lookup(detail)
        if snapshot is None:
            console.print(f"[bold red]Pipeline not found:[/bold red] {detail}")
            raise typer.Exit(code=1)
        console.print(detail_panel(snapshot))
