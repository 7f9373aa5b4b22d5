"""Main Typer application — registers the pipewatch commands.

Entry point: ``pipewatch`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import typer

from pipewatch import __version__
from pipewatch.cli.commands.snapshot_cmd import snapshot_cmd
from pipewatch.cli.commands.watch_cmd import watch_cmd

app = typer.Typer(
    name="pipewatch",
    help="pipewatch: live terminal dashboard for CodePipeline pipelines.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="watch", help="Launch the live pipeline dashboard.")(watch_cmd)
app.command(name="snapshot", help="Fetch once and print pipeline status.")(snapshot_cmd)


@app.command(name="version", help="Show the pipewatch version.")
def version_cmd() -> None:
    typer.echo(f"pipewatch {__version__}")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
