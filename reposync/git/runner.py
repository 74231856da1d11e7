"""Git command runner with timeout handling."""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from reposync.lib.types import SyncError, SyncErrorKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
GIT_BINARY = "git"

START_FAILURE_MARKER = "Failed to start"
TIMEOUT_MARKER = "Command timed out"


@dataclass
class GitResult:
    """Result of an external command."""
    returncode: int
    stdout: str
    stderr: str
    timed_out: bool = False
    start_failed: bool = False

    @property
    def success(self) -> bool:
        return self.returncode == 0 and not self.timed_out and not self.start_failed

    @property
    def failure_kind(self) -> SyncErrorKind | None:
        """Which of start failure / timeout / nonzero exit this was, or None."""
        if self.start_failed:
            return SyncErrorKind.START_FAILURE
        if self.timed_out:
            return SyncErrorKind.TIMEOUT
        if self.returncode != 0:
            return SyncErrorKind.TOOL_FAILURE
        return None

    @property
    def output(self) -> str:
        """stdout and stderr joined, for display."""
        return (self.stdout + self.stderr).strip()

    def to_error(self, action: str) -> SyncError | None:
        """Build a SyncError describing this failure, or None on success."""
        kind = self.failure_kind
        if kind is None:
            return None
        detail = self.stderr.strip() or self.stdout.strip() or f"exit code {self.returncode}"
        return SyncError(kind, f"{action} failed: {detail}")


def _decode(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_command(
    program: str,
    args: list[str],
    cwd: Path | None,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> GitResult:
    """
    Run an external command, capturing its output.

    Args:
        program: Executable name or path
        args: Command arguments
        cwd: Working directory for the command (None: inherit)
        timeout: Timeout in seconds; 0 or None waits indefinitely

    Returns:
        GitResult. On timeout the process is killed and reaped before this
        returns; whatever output it produced so far is kept.
    """
    cmd = [program] + args
    if not timeout:
        timeout = None
    env = dict(os.environ)
    env["GIT_TERMINAL_PROMPT"] = "0"
    # Untranslated messages; output is matched against English markers
    env["LC_ALL"] = "C"
    env["LANGUAGE"] = ""

    logger.debug(f"[GIT] {' '.join(cmd)} (cwd={cwd}, timeout={timeout})")
    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            env=env,
        )
    except subprocess.TimeoutExpired as e:
        logger.warning(f"[GIT] {' '.join(cmd)} timed out after {timeout}s")
        partial_err = _decode(e.stderr)
        return GitResult(
            returncode=-1,
            stdout=_decode(e.stdout),
            stderr=f"{TIMEOUT_MARKER} after {timeout}s\n{partial_err}".rstrip("\n"),
            timed_out=True,
        )
    except OSError as e:
        logger.warning(f"[GIT] could not start {program}: {e}")
        return GitResult(
            returncode=-1,
            stdout="",
            stderr=f"{START_FAILURE_MARKER}: {program}: {e}",
            start_failed=True,
        )

    if result.returncode != 0:
        logger.warning(f"[GIT] {' '.join(cmd)} exited {result.returncode}: {result.stderr.strip()}")
    return GitResult(
        returncode=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )


def run_git(
    args: list[str],
    cwd: Path,
    timeout: float | None = DEFAULT_TIMEOUT,
    git_binary: str = GIT_BINARY,
) -> GitResult:
    """
    Run a git command with timeout handling.

    Args:
        args: Git command arguments (e.g., ["status", "--porcelain"])
        cwd: Repository directory, passed to git as -C
        timeout: Timeout in seconds; 0 or None waits indefinitely
        git_binary: Program to invoke

    Returns:
        GitResult with returncode, stdout, stderr and failure flags
    """
    # -C only: a relative cwd applied as both process cwd and -C doubles up
    return run_command(git_binary, ["-C", str(cwd)] + args, None, timeout)
