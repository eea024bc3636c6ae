"""Git command runner.

Contains:
- run_git: Run a git command from a working directory and return its output
- git_lines: Non-empty output lines of a git command
- get_repo_root: Get the root directory of the current git repository
"""

import subprocess
from pathlib import Path
from typing import Optional

from taskfoundry.git.exceptions import GitError


def run_git(args: list[str], cwd: Optional[Path] = None) -> str:
    """Run a git command and return its output.

    Args:
        args: Arguments after "git".
        cwd: Directory to run in. Pathspecs printed by one call
            (e.g. ``git diff --name-only``) are relative to the repository
            root, so diff helpers pass the root here.

    Returns:
        The stdout of the command, without surrounding whitespace.

    Raises:
        GitError: If git is missing or the command fails.
    """
    command = ["git", "--no-pager"] + args
    try:
        result = subprocess.run(
            command,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            check=True,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise GitError(f"Git command failed: git {' '.join(args)}\n{stderr}") from e
    except FileNotFoundError as e:
        raise GitError("Git is not installed or not in PATH.") from e
    return result.stdout.strip()


def git_lines(args: list[str], cwd: Optional[Path] = None) -> list[str]:
    """Run a git command and return its non-empty output lines."""
    return [line for line in run_git(args, cwd=cwd).splitlines() if line.strip()]


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Get the root directory of the git repository containing ``cwd``.

    Raises:
        GitError: If not in a git repository.
    """
    try:
        return Path(run_git(["rev-parse", "--show-toplevel"], cwd=cwd))
    except GitError as e:
        raise GitError(
            "Not in a git repository. Please run this command from within a git repo."
        ) from e
