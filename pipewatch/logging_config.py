"""Centralized logging configuration for pipewatch.

While the full-screen dashboard owns the terminal, log records go to a
file.  One-shot commands log to stderr through Rich.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level_name: str = "INFO", log_file: Path | None = None) -> None:
    """Configure the root logger.

    Parameters
    ----------
    level_name:
        Logging level name (DEBUG, INFO, WARNING, ERROR).  Unknown names
        fall back to INFO.
    log_file:
        Write records to this file instead of stderr.  Parent directories
        are created.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler: logging.Handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    else:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
    handler.setLevel(level)
    root_logger.addHandler(handler)

    # Quiet down noisy third-party libraries
    for name in ("botocore", "boto3", "urllib3", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)
