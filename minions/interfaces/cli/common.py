"""Shared utilities for Minions CLI commands.

This module provides common utilities used across CLI commands:
- Database selection and store construction
- Running service coroutines with uniform error reporting
- Formatted output helpers (error, success, info)
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Annotated, Any, Optional, TypeVar

import typer

from minions.application import DependencyManager, MinionService
from minions.config import get_settings
from minions.domain.minion import Minion, MinionError, format_version
from minions.infrastructure.storage import JsonTaskStore

T = TypeVar("T")

# Reusable database option for CLI commands
# Usage: def my_command(db: db_option = None) -> None:
db_option = Annotated[Optional[str], typer.Option(
    "--db",
    help="Database key (or set MINIONS_DB env var)",
    envvar="MINIONS_DB",
)]


def configure_logging(verbose: bool = False) -> None:
    """Configure root logging from settings, or DEBUG when verbose."""
    level = "DEBUG" if verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_store(db: str | None = None) -> JsonTaskStore:
    """Build the JSON store for a database key."""
    return JsonTaskStore.from_settings(get_settings(), db)


def get_manager(db: str | None = None) -> DependencyManager:
    settings = get_settings()
    return DependencyManager(get_store(db), max_dependencies=settings.max_dependencies)


def get_minion_service(db: str | None = None) -> MinionService:
    return MinionService(get_store(db))


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a service coroutine, turning domain errors into a CLI exit.

    Raises:
        typer.Exit: With code 1 if the operation raised a MinionError
            or ValueError.
    """
    try:
        return asyncio.run(coro)
    except (MinionError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1) from e


def print_error(msg: str) -> None:
    """Print a formatted error message."""
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    """Print a formatted header with separators."""
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


def format_minion_line(minion: Minion) -> str:
    """One-line summary: id, version, status, priority, title."""
    flags = ""
    if minion.archived:
        flags = " [archived]"
    elif minion.deleted_at is not None:
        flags = " [deleted]"
    return (
        f"{minion.id}  v{format_version(minion)}  "
        f"{minion.status.value:<11} {minion.priority.value:<6} {minion.title}{flags}"
    )


__all__ = [
    "db_option",
    "configure_logging",
    "get_store",
    "get_manager",
    "get_minion_service",
    "run",
    "print_error",
    "print_success",
    "print_info",
    "print_warning",
    "print_separator",
    "print_header",
    "format_minion_line",
]
