"""Logging with rich console output.

Usage:
    from agentic_readiness.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Linting %s", spec_path)
"""

from __future__ import annotations

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from agentic_readiness.errors import ConfigError

# Shared console so log lines and CLI output interleave correctly
console = Console()

PACKAGE_LOGGER = "agentic_readiness"


def _rich_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return a module logger under the package namespace.

    Handlers live on the package logger (see :func:`setup_logging`);
    module loggers only propagate to it, so pytest's ``caplog`` sees them.
    """
    if not name.startswith(PACKAGE_LOGGER):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    show_time: bool = False,
) -> logging.Logger:
    """Configure the package logger once, at the CLI entry point.

    Args:
        level: Default level; the ``LOG_LEVEL`` environment variable wins.
        log_file: Optional file that also receives timestamped records.
        show_time: Show timestamps on the console.

    Raises:
        ConfigError: the level is not a standard logging level name.
    """
    level = (os.getenv("LOG_LEVEL") or level).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(
            f"Unknown log level '{level}'; use DEBUG, INFO, WARNING, ERROR or CRITICAL"
        )

    root = logging.getLogger(PACKAGE_LOGGER)
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(_rich_handler(show_time=show_time))

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(file_handler)

    return root


# Status lines for the CLI, outside the logging hierarchy


def success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def error(message: str) -> None:
    Console(file=sys.stderr).print(f"[red]✗[/red] {escape(message)}")
