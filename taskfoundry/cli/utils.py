"""Shared helpers for CLI commands."""

from pathlib import Path
from typing import NoReturn, Optional

import typer

from taskfoundry.git import GitError, get_repo_root
from taskfoundry.llm import ExhaustedFallbackError, QuotaExceededError


def get_repo_root_safe() -> Optional[Path]:
    """Get the repository root, or None outside a git repository."""
    try:
        return get_repo_root()
    except GitError:
        return None


def _remediation_hint(error: Exception) -> Optional[str]:
    message = str(error)

    if isinstance(error, QuotaExceededError) or (
        isinstance(error, ExhaustedFallbackError) and error.quota_exceeded
    ):
        return (
            "Free tier limit reached. Get unlimited access with your own API key:\n"
            "  1. Groq: free requests every day (recommended): taskfoundry config set-key groq\n"
            "  2. OpenAI: pay-per-use, very reliable: taskfoundry config set-key openai\n"
            "  3. Hugging Face: open models: taskfoundry config set-key huggingface"
        )
    if "429" in message:
        return (
            "Rate limit hit. Try one of these:\n"
            "  - Wait a few minutes and try again\n"
            "  - Use the auto engine: --engine auto\n"
            "  - Set up additional API keys: taskfoundry config set-key <provider>"
        )
    if "401" in message:
        return (
            "Authentication failed. Try:\n"
            "  - Check your API keys: taskfoundry config show\n"
            "  - Set a new key: taskfoundry config set-key <provider>"
        )
    return None


def exit_with_error(error: Exception) -> NoReturn:
    """Print an error (and a hint when one applies) and exit with status 1."""
    typer.secho(f"Error: {error}", fg=typer.colors.RED, err=True)
    hint = _remediation_hint(error)
    if hint:
        typer.echo()
        typer.echo(hint)
    raise typer.Exit(1)


def write_output(text: str, file: Optional[Path]) -> None:
    """Write text to a file, or to stdout when no file is given."""
    if file is None:
        typer.echo(text)
        return
    file.write_text(text + "\n")
    typer.secho(f"Saved to {file}", fg=typer.colors.GREEN)
