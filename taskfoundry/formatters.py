"""Rendering of task descriptions and commit messages."""

import json

from taskfoundry.llm.models import CommitResult, TaskResult


def format_task_markdown(task: TaskResult) -> str:
    """Render a task as Markdown.

    Example output:
        **Title**: Add request logging

        **Summary**: Logs every incoming request

        **Technical considerations**: Uses the stdlib logger
    """
    return (
        f"**Title**: {task.title}\n\n"
        f"**Summary**: {task.summary}\n\n"
        f"**Technical considerations**: {task.technical}"
    )


def format_task_json(task: TaskResult) -> str:
    """Render a task as pretty-printed JSON."""
    return json.dumps(
        {
            "title": task.title,
            "summary": task.summary,
            "technical_considerations": task.technical,
        },
        indent=2,
        ensure_ascii=False,
    )


def format_task(task: TaskResult, output: str = "markdown") -> str:
    """Render a task in the requested output format ("markdown" or "json")."""
    if output == "json":
        return format_task_json(task)
    return format_task_markdown(task)


def sanitize_description(description: str, max_length: int = 72) -> str:
    """Sanitize and truncate the commit description to a single line.

    Args:
        description: The raw description string.
        max_length: Maximum allowed length (default 72 for git best practices).

    Returns:
        A sanitized single-line description, truncated if necessary.
    """
    description = description.strip().split("\n")[0].strip().rstrip(".")

    if len(description) > max_length:
        description = description[: max_length - 3].rstrip() + "..."

    return description


def format_commit_header(commit: CommitResult) -> str:
    """Render the conventional commit header, e.g. ``feat(api)!: add login``."""
    scope = f"({commit.scope})" if commit.scope else ""
    bang = "!" if commit.breaking else ""
    return f"{commit.type}{scope}{bang}: {sanitize_description(commit.description)}"


def format_commit_message(commit: CommitResult) -> str:
    """Render a full conventional commit message.

    Example output:
        feat(auth)!: add token refresh

        Refresh tokens before they expire.

        BREAKING CHANGE: sessions issued before this release are invalid
    """
    parts = [format_commit_header(commit)]
    if commit.body:
        parts.append(commit.body.strip())
    if commit.breaking:
        parts.append(f"BREAKING CHANGE: {commit.breaking_description or commit.description}")
    return "\n\n".join(parts)
