"""
Shared data types for reposync.

This module contains dataclasses and error types used across the git
helpers, the path resolver and the orchestrator to avoid circular imports.
"""

from dataclasses import dataclass
from enum import Enum


class SyncErrorKind(Enum):
    """Why an operation did not reach a successful terminal state."""

    START_FAILURE = "start_failure"  # tool not found / not executable
    TIMEOUT = "timeout"  # bounded operation exceeded its budget
    TOOL_FAILURE = "tool_failure"  # tool ran and exited nonzero
    PARSE_FAILURE = "parse_failure"  # output did not match expected format
    PRECONDITION_FAILURE = "precondition_failure"  # wrong presence state / bad input


class ParseFailure(Exception):
    """Tool output did not match the expected structured format."""

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


class PreconditionFailure(Exception):
    """Operation invoked against a repository in the wrong state."""
    pass


@dataclass
class SyncError:
    """Typed failure carried on an orchestrator result."""
    kind: SyncErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class RepositoryRef:
    """A remote repository as supplied by the listing collaborator."""
    name: str  # unique per account, used as the local directory name
    remote_url: str  # ssh or https clone endpoint


class ChangeKind(Enum):
    """Enumerated tag for a porcelain status code."""

    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    UNTRACKED = "untracked"
    RENAMED = "renamed"
    COPIED = "copied"
    UNMERGED = "unmerged"
    TYPE_CHANGED = "type_changed"
    IGNORED = "ignored"
    UNKNOWN = "unknown"


# Both-sides codes that mark a merge conflict
UNMERGED_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}

_CODE_LETTERS = {
    "M": ChangeKind.MODIFIED,
    "A": ChangeKind.ADDED,
    "D": ChangeKind.DELETED,
    "R": ChangeKind.RENAMED,
    "C": ChangeKind.COPIED,
    "T": ChangeKind.TYPE_CHANGED,
    "U": ChangeKind.UNMERGED,
}


def classify_status_code(code: str) -> ChangeKind:
    """Map a porcelain XY code (or a single-letter code) to a ChangeKind."""
    xy = code.ljust(2)[:2]
    if xy == "??":
        return ChangeKind.UNTRACKED
    if xy == "!!":
        return ChangeKind.IGNORED
    if xy in UNMERGED_CODES or "U" in xy:
        return ChangeKind.UNMERGED
    # Index column wins; fall back to the worktree column
    for letter in (xy[0], xy[1]):
        if letter != " ":
            return _CODE_LETTERS.get(letter, ChangeKind.UNKNOWN)
    return ChangeKind.UNKNOWN


@dataclass(frozen=True)
class ChangeEntry:
    """One line of working-tree status."""
    status_code: str  # raw marker, e.g. " M", "??", "R " ("" for degenerate lines)
    path: str

    @property
    def kind(self) -> ChangeKind:
        return classify_status_code(self.status_code)

    @property
    def target_path(self) -> str:
        """Destination path for renames/copies ("old -> new"), else path."""
        if " -> " in self.path:
            return self.path.split(" -> ", 1)[1]
        return self.path


@dataclass(frozen=True)
class DivergenceResult:
    """Commit counts between a local branch and origin/<branch>."""
    behind: int  # on the remote tracking branch, not local
    ahead: int  # on the local branch, not remote
    branch: str

    @property
    def up_to_date(self) -> bool:
        return self.behind == 0 and self.ahead == 0
