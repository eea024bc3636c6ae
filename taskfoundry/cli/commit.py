"""CLI command for generating conventional commit messages."""

import shlex
from pathlib import Path
from typing import Optional

import typer

from taskfoundry.config import COMMIT_TYPE_NAMES
from taskfoundry.formatters import format_commit_message
from taskfoundry.git import GitError, get_repo_root, get_staged_diff
from taskfoundry.global_config import GlobalConfigError
from taskfoundry.llm import LLMError, generate
from taskfoundry.log import setup_logging
from taskfoundry.settings import SettingsError, load_settings
from taskfoundry.cli.utils import exit_with_error, write_output


def _validate_type(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    if value not in COMMIT_TYPE_NAMES:
        raise typer.BadParameter(f"must be one of: {', '.join(COMMIT_TYPE_NAMES)}")
    return value


def commit_command(
    type: Optional[str] = typer.Option(
        None,
        "--type",
        "-t",
        help=f"Commit type ({', '.join(COMMIT_TYPE_NAMES)})",
        callback=_validate_type,
    ),
    scope: Optional[str] = typer.Option(None, "--scope", "-s", help="Commit scope"),
    breaking: bool = typer.Option(False, "--breaking", "-b", help="Mark as a breaking change"),
    engine: Optional[str] = typer.Option(
        None,
        "--engine",
        "-e",
        help="Engine to use: auto, groq, openai, huggingface, freetier, or local",
    ),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="AI model to use"),
    temperature: Optional[float] = typer.Option(
        None, "--temperature", help="AI temperature (0-2)"
    ),
    retry: bool = typer.Option(
        False,
        "--retry",
        help="Fall back to other engines when the chosen one is temporarily unavailable",
    ),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Save the commit message to a file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Generate a conventional commit message from staged changes."""
    setup_logging(verbose)

    try:
        repo_root = get_repo_root()
        settings = load_settings(
            repo_root,
            overrides={
                "engine": engine,
                "model": model,
                "temperature": temperature,
                "fallback": True if retry else None,
            },
        )
        diff = get_staged_diff(exclude=settings.exclude, repo_root=repo_root)

        result = generate(
            diff,
            engine=settings.engine,
            model=settings.model,
            temperature=settings.temperature,
            commit_mode=True,
            type=type,
            scope=scope,
            breaking=breaking,
            fallback=settings.fallback,
            api_keys=settings.api_keys,
            local_endpoint=settings.local_endpoint,
            timeout=settings.timeout,
            repo_root=repo_root,
        )
    except (GitError, SettingsError, GlobalConfigError, LLMError) as e:
        exit_with_error(e)

    message = format_commit_message(result)
    write_output(message, file)

    typer.echo()
    typer.echo("To use this commit message:")
    if file:
        typer.echo(f"   git commit -F {shlex.quote(str(file))}")
    else:
        typer.echo(f"   git commit -m {shlex.quote(message)}")
