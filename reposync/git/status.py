"""Git status operations."""

from pathlib import Path

from reposync.git.runner import run_git, GitResult, DEFAULT_TIMEOUT, GIT_BINARY
from reposync.lib.types import ChangeEntry


def parse_status_line(line: str) -> ChangeEntry:
    """
    Parse one status line into a ChangeEntry.

    Tab-separated lines ("XY\\tpath") take everything after the first tab.
    Otherwise the fixed-width porcelain layout is assumed ("XY path") and the
    path starts at column 3. Short lines become a degenerate entry whose path
    is the whole trimmed line. Never raises.
    """
    if "\t" in line:
        code, _, path = line.partition("\t")
        return ChangeEntry(status_code=code, path=path)
    if len(line) >= 4:
        return ChangeEntry(status_code=line[:2], path=line[3:].strip())
    return ChangeEntry(status_code="", path=line.strip())


def parse_status(raw: str) -> list[ChangeEntry]:
    """Parse line-oriented status output. Empty lines are skipped; order is kept."""
    return [parse_status_line(line) for line in raw.splitlines() if line]


def get_status_porcelain(
    repo: Path,
    timeout: float | None = DEFAULT_TIMEOUT,
    git_binary: str = GIT_BINARY,
) -> GitResult:
    """Run git status in porcelain format."""
    return run_git(["status", "--porcelain"], repo, timeout=timeout, git_binary=git_binary)


def get_status_text(
    repo: Path,
    timeout: float | None = DEFAULT_TIMEOUT,
    git_binary: str = GIT_BINARY,
) -> GitResult:
    """Run plain, human-readable git status (includes tracking info)."""
    return run_git(["status"], repo, timeout=timeout, git_binary=git_binary)
