"""CLI command for generating task descriptions."""

from pathlib import Path
from typing import Optional

import typer

from taskfoundry.formatters import format_task
from taskfoundry.git import GitError, get_diff, get_repo_root
from taskfoundry.global_config import GlobalConfigError
from taskfoundry.llm import LLMError, generate
from taskfoundry.log import setup_logging
from taskfoundry.settings import SettingsError, load_settings
from taskfoundry.cli.utils import exit_with_error, write_output


def task_command(
    staged: bool = typer.Option(
        False,
        "--staged",
        help="Use staged changes (git diff --cached)",
    ),
    commit: Optional[str] = typer.Option(
        None,
        "--commit",
        help="Compare against a specific commit instead of HEAD~1",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: markdown or json",
    ),
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
    max_tokens: Optional[int] = typer.Option(
        None, "--max-tokens", help="Maximum tokens for AI response (1-4000)"
    ),
    detailed: Optional[bool] = typer.Option(
        None,
        "--detailed/--concise",
        help="Generate a detailed task description",
    ),
    retry: bool = typer.Option(
        False,
        "--retry",
        help="Fall back to other engines when the chosen one is temporarily unavailable",
    ),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Save output to file instead of stdout"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Generate a task description from a git diff."""
    setup_logging(verbose)

    try:
        repo_root = get_repo_root()
        settings = load_settings(
            repo_root,
            overrides={
                "engine": engine,
                "model": model,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "output": output,
                "detailed": detailed,
                "fallback": True if retry else None,
            },
        )
        diff = get_diff(
            staged=staged, base=commit, exclude=settings.exclude, repo_root=repo_root
        )

        result = generate(
            diff,
            engine=settings.engine,
            model=settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            detailed=settings.detailed,
            fallback=settings.fallback,
            api_keys=settings.api_keys,
            local_endpoint=settings.local_endpoint,
            timeout=settings.timeout,
            repo_root=repo_root,
        )
    except (GitError, SettingsError, GlobalConfigError, LLMError) as e:
        exit_with_error(e)

    write_output(format_task(result, settings.output), file)
