"""Git remote operations."""

from pathlib import Path

from reposync.git.runner import run_git, GitResult, GIT_BINARY


def clone(
    remote_url: str,
    target: Path,
    cwd: Path,
    timeout: float | None = 0,
    git_binary: str = GIT_BINARY,
) -> GitResult:
    """Clone remote_url into target. Unbounded by default."""
    return run_git(["clone", remote_url, str(target)], cwd, timeout=timeout, git_binary=git_binary)


def fetch(
    repo: Path,
    remote: str = "origin",
    timeout: float | None = 60,
    git_binary: str = GIT_BINARY,
) -> GitResult:
    """Fetch from remote."""
    return run_git(["fetch", remote], repo, timeout=timeout, git_binary=git_binary)


def pull(repo: Path, timeout: float | None = 120, git_binary: str = GIT_BINARY) -> GitResult:
    """Pull the current branch from its upstream."""
    return run_git(["pull"], repo, timeout=timeout, git_binary=git_binary)


def push(repo: Path, timeout: float | None = 120, git_binary: str = GIT_BINARY) -> GitResult:
    """Push to remote."""
    return run_git(["push"], repo, timeout=timeout, git_binary=git_binary)
