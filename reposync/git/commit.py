"""Git commit operations."""

from pathlib import Path

from reposync.git.runner import run_git, GitResult, DEFAULT_TIMEOUT, GIT_BINARY


def stage_all(repo: Path, timeout: float | None = DEFAULT_TIMEOUT, git_binary: str = GIT_BINARY) -> GitResult:
    """Stage all changes (new, modified, deleted)."""
    return run_git(["add", "-A"], repo, timeout=timeout, git_binary=git_binary)


def commit(
    repo: Path,
    message: str,
    timeout: float | None = DEFAULT_TIMEOUT,
    git_binary: str = GIT_BINARY,
) -> GitResult:
    """Create a commit with the given message."""
    return run_git(["commit", "-m", message], repo, timeout=timeout, git_binary=git_binary)
