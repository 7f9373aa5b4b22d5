"""``pipewatch watch`` — launch the live dashboard.

Polls the watched pipelines once at startup and then every poll interval,
until ``q``, ``Escape`` or ``Ctrl+C``.
"""

from __future__ import annotations

from typing import Optional

import typer

from pipewatch.bridge.codepipeline import CodePipelineClient
from pipewatch.cli.commands import load_config
from pipewatch.core.fetcher import PipelineFetcher
from pipewatch.dashboard.app import PipelineDashboardApp
from pipewatch.logging_config import configure_logging
from pipewatch.monitor.state import DashboardState


def watch_cmd(
    pattern: Optional[str] = typer.Option(
        None,
        "--pattern",
        "-p",
        help="Regex (case-insensitive) selecting watched pipelines.",
    ),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Seconds between refresh cycles.",
    ),
    region: Optional[str] = typer.Option(None, "--region", help="AWS region."),
    profile: Optional[str] = typer.Option(None, "--profile", help="AWS profile."),
) -> None:
    """Show the live pipeline dashboard."""
    config = load_config(pattern=pattern, interval=interval, region=region, profile=profile)
    configure_logging(config.log_level, config.log_file)

    client = CodePipelineClient(
        config.aws_region,
        config.aws_profile,
        timeout=config.detail_timeout_seconds,
    )
    app = PipelineDashboardApp(
        PipelineFetcher.from_config(config, client),
        DashboardState(),
        interval=config.poll_interval_seconds,
        name_width=config.name_width,
        strict=config.strict,
    )
    app.run()
