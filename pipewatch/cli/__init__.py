"""pipewatch CLI — Typer-based command-line interface.

Provides the ``pipewatch`` command with ``watch`` (live dashboard) and
``snapshot`` (one-shot status print) subcommands.
"""
