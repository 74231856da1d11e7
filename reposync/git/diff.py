"""Git diff operations."""

from pathlib import Path

from reposync.git.runner import run_git, GitResult, DEFAULT_TIMEOUT, GIT_BINARY


def diff_path(
    repo: Path,
    path: str,
    timeout: float | None = DEFAULT_TIMEOUT,
    git_binary: str = GIT_BINARY,
) -> GitResult:
    """Unstaged diff of a single path, in git's own format."""
    return run_git(["diff", "--", path], repo, timeout=timeout, git_binary=git_binary)
