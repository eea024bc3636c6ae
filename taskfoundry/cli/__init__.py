"""CLI entry point for taskfoundry.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

from typing import Optional

import typer

from taskfoundry import __version__
from taskfoundry.cli.config import config_app
from taskfoundry.cli.commit import commit_command
from taskfoundry.cli.task import task_command
from taskfoundry.cli.usage import usage_command

# Main application
app = typer.Typer(
    name="taskfoundry",
    help="taskfoundry: AI-powered task descriptions and commit messages from git diffs",
    add_completion=False,
    no_args_is_help=True,
)

# Add subcommand groups
app.add_typer(config_app, name="config")

# Add individual commands
app.command("task")(task_command)
app.command("commit")(commit_command)
app.command("usage")(usage_command)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"taskfoundry {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """taskfoundry: AI-powered task descriptions and commit messages from git diffs."""


if __name__ == "__main__":
    app()
