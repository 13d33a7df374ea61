"""Logging configuration for the semver-release CLI."""

from __future__ import annotations

import logging
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure logging based on CLI options.

    Args:
        verbosity: Number of -v flags (0=INFO, 1+=DEBUG with paths and times)
        quiet: Only show warnings and errors (takes precedence over verbosity)
        stream: Output stream for log records, stderr when None
    """
    if quiet:
        level = logging.WARNING
    elif verbosity >= 1:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = RichHandler(
        console=Console(file=stream, stderr=stream is None),
        show_time=verbosity >= 1,
        show_path=verbosity >= 1,
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
