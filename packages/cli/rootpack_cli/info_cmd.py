"""Info command - Version information."""

import sys

import typer
from rich.table import Table

from .utils import console, error


def version():
    """
    Show rootpack version information.

    Examples:
        rootpack version
    """
    try:
        import rootpack_sdk

        python_version = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

        table = Table(title="rootpack Version Information", show_header=True, header_style="bold cyan")
        table.add_column("Component", style="cyan", no_wrap=True)
        table.add_column("Version", style="green")

        table.add_row("SDK", rootpack_sdk.__version__)
        table.add_row("Python", python_version)

        console.print(table)

    except Exception as e:
        error(f"Failed to get version info: {str(e)}")
        raise typer.Exit(1)
