"""Status command - Compare required and installed packages."""

import json
from typing import Optional

import typer
from rich.table import Table
from rootpack_schema import ReconciliationReport

from .utils import console, get_manager, handle_error, success, warning


def render_report(report: ReconciliationReport) -> Table:
    """Render a reconciliation report as a table."""
    table = Table(title="Composer Packages", show_header=True, header_style="bold cyan")
    table.add_column("Package", style="cyan", no_wrap=True)
    table.add_column("Constraint")
    table.add_column("Installed", style="green")
    table.add_column("Required by")

    for package_name in report:
        package = report[package_name]
        installed = package.version or "[red]not installed[/red]"
        required_by = ", ".join(package.required_by) or "[yellow]nobody[/yellow]"
        table.add_row(package_name, package.constraint or "-", installed, required_by)

    return table


def status(
    root: Optional[str] = typer.Option(None, "--root", "-r", help="Drupal app root"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    check: bool = typer.Option(
        False, "--check", help="Exit with status 1 when an update is needed"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """
    Show required packages, their installed versions and their dependents.

    Packages without an installed version are missing; packages required by
    nobody will be removed by the next update.

    Examples:
        rootpack status
        rootpack status --json
        rootpack status --check
    """
    try:
        manager = get_manager(root, verbose)
        report = manager.get_required_packages()
    except Exception as e:
        handle_error(e, verbose)
        return

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
        if check and report.needs_update:
            raise typer.Exit(1)
        return

    console.print(render_report(report))
    if report.needs_update:
        missing = report.missing()
        orphaned = report.orphaned()
        if missing:
            warning(f"{len(missing)} package(s) not installed: {', '.join(missing)}")
        if orphaned:
            warning(f"{len(orphaned)} package(s) no longer required: {', '.join(orphaned)}")
        warning("Run 'rootpack update' to install and remove packages.")
        if check:
            raise typer.Exit(1)
    else:
        success("All required packages are installed")
