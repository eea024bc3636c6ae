"""Git helpers for taskfoundry.

This package provides:
- exceptions: GitError, NoStagedChangesError, NoChangesError
- runner: run_git, git_lines, get_repo_root
- diff: get_diff, get_staged_diff, _should_exclude_file
"""

from taskfoundry.git.exceptions import (
    GitError,
    NoChangesError,
    NoStagedChangesError,
)
from taskfoundry.git.runner import (
    git_lines,
    run_git,
    get_repo_root,
)
from taskfoundry.git.diff import (
    DEFAULT_MAX_DIFF_CHARS,
    _should_exclude_file,
    get_diff,
    get_staged_diff,
)


__all__ = [
    "GitError",
    "NoChangesError",
    "NoStagedChangesError",
    "git_lines",
    "run_git",
    "get_repo_root",
    "DEFAULT_MAX_DIFF_CHARS",
    "_should_exclude_file",
    "get_diff",
    "get_staged_diff",
]
