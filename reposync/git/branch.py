"""Git branch operations and ahead/behind counting."""

import re
from pathlib import Path

from reposync.git.runner import run_git, GitResult, DEFAULT_TIMEOUT, GIT_BINARY
from reposync.lib.types import DivergenceResult, ParseFailure

_COUNT_SEPARATOR = re.compile(r"[\t ]+")
_NON_NEGATIVE_INT = re.compile(r"[0-9]+")


def get_current_branch(
    repo: Path,
    default_branch: str,
    timeout: float | None = DEFAULT_TIMEOUT,
    git_binary: str = GIT_BINARY,
) -> str:
    """
    Get the current branch name.

    Falls back to default_branch when the query fails, prints nothing,
    or reports a detached HEAD.
    """
    result = run_git(["rev-parse", "--abbrev-ref", "HEAD"], repo, timeout=timeout, git_binary=git_binary)
    if result.success:
        branch = result.stdout.strip()
        if branch and branch != "HEAD":
            return branch
    return default_branch


def get_divergence_raw(
    repo: Path,
    branch: str,
    timeout: float | None = DEFAULT_TIMEOUT,
    git_binary: str = GIT_BINARY,
) -> GitResult:
    """Run the left-right count of origin/<branch> against HEAD."""
    return run_git(
        ["rev-list", "--left-right", "--count", f"origin/{branch}...HEAD"],
        repo,
        timeout=timeout,
        git_binary=git_binary,
    )


def compute_divergence(branch: str, raw: str) -> DivergenceResult:
    """
    Parse "<behind><sep><ahead>" into a DivergenceResult.

    The left side of origin/<branch>...HEAD is the remote, so the first
    number is how far the local branch is behind and the second how far
    it is ahead.

    Raises:
        ParseFailure: unless the output is exactly two non-negative integers
    """
    parts = _COUNT_SEPARATOR.split(raw.strip())
    if len(parts) != 2 or not all(_NON_NEGATIVE_INT.fullmatch(p) for p in parts):
        raise ParseFailure(f"Unexpected ahead/behind output: {raw.strip()!r}", raw)
    return DivergenceResult(behind=int(parts[0]), ahead=int(parts[1]), branch=branch)
