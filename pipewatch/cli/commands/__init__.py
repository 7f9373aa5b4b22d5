"""CLI subcommands and the option handling they share."""

from __future__ import annotations

import typer
from pydantic import ValidationError

from pipewatch.config import WatchConfig


def load_config(
    *,
    pattern: str | None = None,
    interval: float | None = None,
    region: str | None = None,
    profile: str | None = None,
) -> WatchConfig:
    """Build a ``WatchConfig`` with command-line values taking precedence."""
    overrides: dict[str, object] = {}
    if pattern is not None:
        overrides["name_pattern"] = pattern
    if interval is not None:
        overrides["poll_interval_ms"] = int(interval * 1000)
    if region is not None:
        overrides["aws_region"] = region
    if profile is not None:
        overrides["aws_profile"] = profile

    try:
        return WatchConfig(**overrides)
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc
