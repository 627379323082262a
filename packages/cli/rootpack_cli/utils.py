"""Shared console helpers for rootpack commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rootpack_common import RootpackError, configure_logging, load_settings
from rootpack_sdk import PackageManager, find_app_root

console = Console()
err_console = Console(stderr=True)


def success(message: str) -> None:
    console.print(f"[green]✔[/green] {message}")


def info(message: str) -> None:
    console.print(f"[cyan]ℹ[/cyan] {message}")


def warning(message: str) -> None:
    console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    err_console.print(f"[red]✖[/red] {message}")


def handle_error(e: Exception, verbose: bool = False) -> None:
    """Report an error and exit with status 1."""
    if isinstance(e, RootpackError):
        error(e.message)
        if e.retryable:
            info("This error is temporary; run the command again shortly.")
    else:
        error(f"Unexpected error: {e}")
    if verbose:
        err_console.print_exception()
    raise typer.Exit(1)


def get_manager(root: Optional[str], verbose: bool = False) -> PackageManager:
    """
    Create a PackageManager for the given (or detected) app root.

    Without an explicit root the app root is searched upwards from the
    current directory.
    """
    if root is None:
        detected = find_app_root()
        root_path = detected if detected is not None else Path.cwd()
    else:
        root_path = Path(root)

    settings = load_settings(root_path)
    configure_logging("debug" if verbose else settings.log_level, json_format=settings.log_json)
    return PackageManager(settings)
