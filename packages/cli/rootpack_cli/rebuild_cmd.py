"""Rebuild, install and update commands - Regenerate composer.json and run Composer."""

from typing import Optional

import typer

from .utils import console, get_manager, handle_error, info, success


def rebuild(
    root: Optional[str] = typer.Option(None, "--root", "-r", help="Drupal app root"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """
    Regenerate the root composer.json from core and extension manifests.

    Examples:
        rootpack rebuild
        rootpack rebuild --root /var/www/drupal
    """
    try:
        manager = get_manager(root, verbose)
        written = manager.rebuild_root_package()
    except Exception as e:
        handle_error(e, verbose)
        return

    root_package = manager.last_root_package
    success(f"Wrote {manager.settings.root_manifest_path} ({written} bytes)")
    if verbose and root_package is not None:
        info(f"Sources: {root_package.extra.get('_sources', '')}")
        info(f"Requirements: {len(root_package.require)}")


def _run(command: str, root: Optional[str], verbose: bool) -> None:
    try:
        manager = get_manager(root, verbose)
        with console.status(f"[bold green]Running composer {command}..."):
            result = manager.run_resolver(command)
    except Exception as e:
        handle_error(e, verbose)
        return

    if verbose and result.stdout:
        console.print(result.stdout)
    success(f"composer {command} finished")


def install(
    root: Optional[str] = typer.Option(None, "--root", "-r", help="Drupal app root"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """
    Regenerate the root composer.json, then run 'composer install'.

    Examples:
        rootpack install
    """
    _run("install", root, verbose)


def update(
    root: Optional[str] = typer.Option(None, "--root", "-r", help="Drupal app root"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """
    Regenerate the root composer.json, then run 'composer update'.

    Examples:
        rootpack update
    """
    _run("update", root, verbose)
