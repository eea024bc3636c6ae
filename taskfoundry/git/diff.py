"""Git diff utilities.

Contains:
- get_diff: Diff of the last commit, the staged changes, or against a ref
- get_staged_diff: Staged diff, required to be non-empty
- _should_exclude_file: Check if a file should be excluded based on patterns
"""

import fnmatch
from pathlib import Path
from typing import Optional

from taskfoundry.git.exceptions import NoChangesError, NoStagedChangesError
from taskfoundry.git.runner import git_lines, run_git

DEFAULT_MAX_DIFF_CHARS = 50000


def _should_exclude_file(filename: str, patterns: list[str]) -> bool:
    """Check if a file should be excluded based on patterns.

    Supports glob patterns like *.lock, build/*, etc.

    Args:
        filename: The file path to check.
        patterns: List of patterns to match against.

    Returns:
        True if the file should be excluded.
    """
    for pattern in patterns:
        if filename == pattern:
            return True
        if fnmatch.fnmatch(filename, pattern):
            return True
        # Patterns may name just the basename
        if fnmatch.fnmatch(Path(filename).name, pattern):
            return True
    return False


def _diff_range_args(staged: bool, base: Optional[str]) -> list[str]:
    if staged:
        return ["--cached"]
    if base:
        return [base]
    return ["HEAD~1"]


def _truncate(diff: str, max_chars: int) -> str:
    if len(diff) > max_chars:
        return diff[:max_chars] + "\n...[truncated]\n"
    return diff


def get_diff(
    staged: bool = False,
    base: Optional[str] = None,
    exclude: Optional[list[str]] = None,
    max_chars: int = DEFAULT_MAX_DIFF_CHARS,
    repo_root: Optional[Path] = None,
) -> str:
    """Get the diff to describe.

    Args:
        staged: Use the staged changes (git diff --cached).
        base: Compare the working tree against this ref instead of HEAD~1.
        exclude: Glob patterns of files to leave out.
        max_chars: Maximum characters for the diff output.
        repo_root: Repository root; git runs from here so the file list
            resolves as pathspecs from any subdirectory.

    Returns:
        The diff string.

    Raises:
        NoChangesError: If there is nothing to describe.
    """
    range_args = _diff_range_args(staged, base)
    files = git_lines(["diff", "--name-only"] + range_args, cwd=repo_root)
    files = [f for f in files if not _should_exclude_file(f, exclude or [])]

    if not files:
        raise NoChangesError("No changes found.")

    diff = run_git(["diff", "--no-color"] + range_args + ["--"] + files, cwd=repo_root)
    if not diff:
        raise NoChangesError("No changes found.")

    return _truncate(diff, max_chars)


def get_staged_diff(
    exclude: Optional[list[str]] = None,
    max_chars: int = DEFAULT_MAX_DIFF_CHARS,
    repo_root: Optional[Path] = None,
) -> str:
    """Get the staged diff, excluding ignored files and truncating if necessary.

    Raises:
        NoStagedChangesError: If there are no staged changes.
    """
    if not git_lines(["diff", "--cached", "--name-only"], cwd=repo_root):
        raise NoStagedChangesError(
            'No staged changes found. Use "git add" to stage files first.'
        )

    try:
        return get_diff(staged=True, exclude=exclude, max_chars=max_chars, repo_root=repo_root)
    except NoChangesError:
        raise NoStagedChangesError(
            "Only excluded files are staged - no code changes to describe."
        )
