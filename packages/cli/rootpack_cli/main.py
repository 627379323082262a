"""rootpack CLI - Main entry point."""
import typer

from . import info_cmd, rebuild_cmd, status_cmd

app = typer.Typer(
    name="rootpack",
    help="rootpack CLI - Manage Composer dependencies of Drupal extensions",
    no_args_is_help=True,
    add_completion=False,
)

# Register all commands
app.command()(status_cmd.status)
app.command()(rebuild_cmd.rebuild)
app.command()(rebuild_cmd.install)
app.command()(rebuild_cmd.update)
app.command()(info_cmd.version)


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
