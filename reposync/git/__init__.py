"""Git operations for reposync.

This module provides clean interfaces for the git commands the sync
orchestrator drives. Nothing outside this package calls subprocess.

Return type conventions:
- Functions returning GitResult: Caller must check .success before using output.
  Examples: clone(), fetch(), stage_all(), commit(), push()
- Parsers are pure: parse_status() never fails, compute_divergence()
  raises ParseFailure instead of guessing.
- get_current_branch() returns the configured default on failure.
"""

from reposync.git.runner import (
    GitResult,
    run_command,
    run_git,
)
from reposync.git.status import (
    parse_status,
    parse_status_line,
    get_status_porcelain,
    get_status_text,
)
from reposync.git.branch import (
    get_current_branch,
    get_divergence_raw,
    compute_divergence,
)
from reposync.git.commit import (
    stage_all,
    commit,
)
from reposync.git.remote import (
    clone,
    fetch,
    pull,
    push,
)
from reposync.git.diff import (
    diff_path,
)

__all__ = [
    # runner
    "GitResult",
    "run_command",
    "run_git",
    # status
    "parse_status",
    "parse_status_line",
    "get_status_porcelain",
    "get_status_text",
    # branch
    "get_current_branch",
    "get_divergence_raw",
    "compute_divergence",
    # commit
    "stage_all",
    "commit",
    # remote
    "clone",
    "fetch",
    "pull",
    "push",
    # diff
    "diff_path",
]
