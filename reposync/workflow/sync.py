"""
Repository sync orchestrator.

Public operations over a RepositoryRef and a SyncConfig:

    clone(config, ref)                       -> CloneResult
    refresh_local_state(config, ref)         -> RefreshResult
    check_updates(config, ref)               -> UpdateCheckResult
    pull(config, ref)                        -> PullResult
    show_diff(config, ref, path)             -> DiffResult
    commit_and_push(config, ref, message)    -> PushOutcome

Every operation resolves the working copy from (base_dir, name), holds the
repository's lock for its whole duration and returns a typed result. Failures
are reported on the result (ok=False, error=SyncError); they are never raised
and never dropped. The only tool failure reinterpreted as success is a commit
that had nothing to commit (see NOTHING_TO_COMMIT_MARKERS).
"""

import logging
from dataclasses import dataclass, field
from typing import Callable

from reposync import git
from reposync.git.runner import GitResult
from reposync.lib import paths
from reposync.lib.config import SyncConfig
from reposync.lib.paths import LocalRepository
from reposync.lib.types import (
    ChangeEntry,
    DivergenceResult,
    ParseFailure,
    PreconditionFailure,
    RepositoryRef,
    SyncError,
    SyncErrorKind,
)
from reposync.runner.locking import LockTimeout, repo_lock
from reposync.workflow.fsm import CommitPushFSM

logger = logging.getLogger(__name__)

# Closed list: commit output that means "nothing staged", treated as a no-op
NOTHING_TO_COMMIT_MARKERS = (
    "nothing to commit",
    "nothing added to commit",
    "no changes added to commit",
)


@dataclass
class SyncResult:
    """Fields shared by every operation result."""
    name: str
    ok: bool = False
    error: SyncError | None = None


@dataclass
class RefreshResult(SyncResult):
    entries: list[ChangeEntry] = field(default_factory=list)
    outcome: GitResult | None = None

    @property
    def clean(self) -> bool:
        """True when the status query succeeded and reported no changes."""
        return self.ok and not self.entries


@dataclass
class CloneResult(SyncResult):
    local_path: str = ""
    already_exists: bool = False
    outcome: GitResult | None = None
    # State of the new working copy, after a successful clone
    refresh: RefreshResult | None = None


@dataclass
class UpdateCheckResult(SyncResult):
    divergence: DivergenceResult | None = None
    branch: str = ""
    fetch_outcome: GitResult | None = None
    # Failed or timed-out fetch; counts below then use stale remote refs
    fetch_error: SyncError | None = None
    count_outcome: GitResult | None = None
    # Set when the count could not be used and a plain status was shown instead
    fallback_text: str | None = None
    fallback_reason: SyncError | None = None

    @property
    def fetched(self) -> bool:
        return self.fetch_outcome is not None and self.fetch_outcome.success


@dataclass
class PullResult(SyncResult):
    outcome: GitResult | None = None
    refresh: RefreshResult | None = None


@dataclass
class DiffResult(SyncResult):
    path: str = ""
    diff_text: str = ""
    outcome: GitResult | None = None


@dataclass
class PushOutcome(SyncResult):
    state: str = "idle"
    # GitResult of each step that ran, keyed by "status", "stage", "commit", "push"
    steps: dict[str, GitResult] = field(default_factory=dict)
    entries: list[ChangeEntry] = field(default_factory=list)
    # Working-tree state after the run, once anything past the status query ran
    refresh: RefreshResult | None = None

    @property
    def nothing_to_do(self) -> bool:
        return self.state == "clean"

    @property
    def outcome(self) -> GitResult | None:
        """Result of the last step that ran."""
        if not self.steps:
            return None
        return list(self.steps.values())[-1]


def _precondition(message: str) -> SyncError:
    return SyncError(SyncErrorKind.PRECONDITION_FAILURE, message)


def _run_locked(
    config: SyncConfig,
    ref: RepositoryRef,
    result_type: type,
    body: Callable[[LocalRepository], SyncResult],
) -> SyncResult:
    """Resolve ref, hold its lock while body runs, map failures onto result_type."""
    try:
        repo = paths.local_repository(config.base_dir, ref)
    except PreconditionFailure as e:
        return result_type(name=ref.name, error=_precondition(str(e)))

    try:
        with repo_lock(config.locks_path, repo.local_path, timeout=config.lock_timeout):
            return body(repo)
    except LockTimeout as e:
        logger.warning(f"[SYNC] {ref.name}: {e}")
        return result_type(name=ref.name, error=SyncError(SyncErrorKind.TIMEOUT, str(e)))


def _require_present(repo: LocalRepository) -> SyncError | None:
    if not repo.present:
        return _precondition(f"Local copy missing: {repo.local_path}")
    return None


# ---------------------------------------------------------------------------
# Clone
# ---------------------------------------------------------------------------

def clone(config: SyncConfig, ref: RepositoryRef) -> CloneResult:
    """Clone ref into base_dir/name. No tool call if the path already exists."""
    def body(repo: LocalRepository) -> CloneResult:
        result = CloneResult(name=repo.name, local_path=str(repo.local_path))
        if repo.local_path.exists():
            logger.info(f"[SYNC] {repo.name}: already exists at {repo.local_path}")
            result.already_exists = True
            result.error = _precondition(f"Already exists: {repo.local_path}")
            return result
        if not ref.remote_url:
            result.error = _precondition(f"No clone URL for {repo.name}")
            return result

        config.base_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"[SYNC] {repo.name}: cloning {ref.remote_url}")
        outcome = git.clone(
            ref.remote_url,
            repo.local_path,
            config.base_dir,
            timeout=config.clone_timeout,
            git_binary=config.git_binary,
        )
        result.outcome = outcome
        result.ok = outcome.success
        result.error = outcome.to_error("clone")
        if result.ok:
            logger.info(f"[SYNC] {repo.name}: cloned to {repo.local_path}")
            result.refresh = _refresh(config, repo)
        return result

    return _run_locked(config, ref, CloneResult, body)


# ---------------------------------------------------------------------------
# Refresh local state
# ---------------------------------------------------------------------------

def _refresh(config: SyncConfig, repo: LocalRepository) -> RefreshResult:
    result = RefreshResult(name=repo.name)
    result.error = _require_present(repo)
    if result.error:
        return result

    outcome = git.get_status_porcelain(
        repo.local_path, timeout=config.status_timeout, git_binary=config.git_binary
    )
    result.outcome = outcome
    if not outcome.success:
        result.error = outcome.to_error("status")
        return result

    result.entries = git.parse_status(outcome.stdout)
    result.ok = True
    if result.clean:
        logger.info(f"[SYNC] {repo.name}: working tree clean")
    else:
        logger.info(f"[SYNC] {repo.name}: {len(result.entries)} changed file(s)")
    return result


def refresh_local_state(config: SyncConfig, ref: RepositoryRef) -> RefreshResult:
    """Query working-tree status. result.clean is the "working tree clean" sentinel."""
    return _run_locked(config, ref, RefreshResult, lambda repo: _refresh(config, repo))


# ---------------------------------------------------------------------------
# Check updates
# ---------------------------------------------------------------------------

def _check_updates(config: SyncConfig, repo: LocalRepository) -> UpdateCheckResult:
    result = UpdateCheckResult(name=repo.name)
    result.error = _require_present(repo)
    if result.error:
        return result

    fetch_outcome = git.fetch(
        repo.local_path, timeout=config.fetch_timeout, git_binary=config.git_binary
    )
    result.fetch_outcome = fetch_outcome
    if fetch_outcome.start_failed:
        result.error = fetch_outcome.to_error("fetch")
        return result
    if not fetch_outcome.success:
        result.fetch_error = fetch_outcome.to_error("fetch")
        logger.warning(f"[SYNC] {repo.name}: fetch failed, comparing with stale remote refs")

    branch = git.get_current_branch(
        repo.local_path,
        config.default_branch,
        timeout=config.status_timeout,
        git_binary=config.git_binary,
    )
    result.branch = branch

    count_outcome = git.get_divergence_raw(
        repo.local_path, branch, timeout=config.status_timeout, git_binary=config.git_binary
    )
    result.count_outcome = count_outcome
    if count_outcome.success:
        try:
            result.divergence = git.compute_divergence(branch, count_outcome.stdout)
        except ParseFailure as e:
            result.fallback_reason = SyncError(SyncErrorKind.PARSE_FAILURE, str(e))
    else:
        result.fallback_reason = count_outcome.to_error("ahead/behind count")

    if result.divergence is not None:
        result.ok = True
        logger.info(
            f"[SYNC] {repo.name}: {branch} behind {result.divergence.behind}, "
            f"ahead {result.divergence.ahead}"
        )
        return result

    # No usable count (typically no upstream for this branch): show plain status
    logger.info(f"[SYNC] {repo.name}: {result.fallback_reason}; falling back to status")
    status_outcome = git.get_status_text(
        repo.local_path, timeout=config.status_timeout, git_binary=config.git_binary
    )
    result.fallback_text = "\n".join(
        part for part in (fetch_outcome.output, status_outcome.output) if part
    )
    if status_outcome.success:
        result.ok = True
    else:
        result.error = status_outcome.to_error("status")
    return result


def check_updates(config: SyncConfig, ref: RepositoryRef) -> UpdateCheckResult:
    """Fetch and report how far the current branch is behind/ahead of origin."""
    return _run_locked(config, ref, UpdateCheckResult, lambda repo: _check_updates(config, repo))


# ---------------------------------------------------------------------------
# Pull
# ---------------------------------------------------------------------------

def _pull(config: SyncConfig, repo: LocalRepository) -> PullResult:
    result = PullResult(name=repo.name)
    result.error = _require_present(repo)
    if result.error:
        return result

    logger.info(f"[SYNC] {repo.name}: pulling")
    outcome = git.pull(repo.local_path, timeout=config.pull_timeout, git_binary=config.git_binary)
    result.outcome = outcome
    result.ok = outcome.success
    result.error = outcome.to_error("pull")

    # Working tree may have changed either way
    result.refresh = _refresh(config, repo)
    return result


def pull(config: SyncConfig, ref: RepositoryRef) -> PullResult:
    """Pull, then refresh local state."""
    return _run_locked(config, ref, PullResult, lambda repo: _pull(config, repo))


# ---------------------------------------------------------------------------
# Show diff
# ---------------------------------------------------------------------------

def _show_diff(config: SyncConfig, repo: LocalRepository, path: str) -> DiffResult:
    result = DiffResult(name=repo.name, path=path)
    result.error = _require_present(repo)
    if result.error:
        return result

    outcome = git.diff_path(
        repo.local_path, path, timeout=config.status_timeout, git_binary=config.git_binary
    )
    result.outcome = outcome
    result.diff_text = outcome.stdout
    result.ok = outcome.success
    result.error = outcome.to_error("diff")
    return result


def show_diff(config: SyncConfig, ref: RepositoryRef, path: str) -> DiffResult:
    """Raw diff text for one path, exactly as git prints it."""
    if not path or not path.strip():
        return DiffResult(name=ref.name, error=_precondition("No file selected"))
    return _run_locked(config, ref, DiffResult, lambda repo: _show_diff(config, repo, path))


# ---------------------------------------------------------------------------
# Commit and push
# ---------------------------------------------------------------------------

def is_nothing_to_commit(outcome: GitResult) -> bool:
    """Whether a failed commit only means nothing was staged."""
    text = (outcome.stdout + "\n" + outcome.stderr).lower()
    return any(marker in text for marker in NOTHING_TO_COMMIT_MARKERS)


def _commit_and_push(
    config: SyncConfig,
    repo: LocalRepository,
    message: str,
    on_transition: Callable[[str, str, str], None] | None,
) -> PushOutcome:
    result = PushOutcome(name=repo.name)
    result.error = _require_present(repo)
    if result.error:
        return result

    fsm = CommitPushFSM(repo.name, on_transition=on_transition)
    kwargs = dict(timeout=config.status_timeout, git_binary=config.git_binary)

    def finish() -> PushOutcome:
        if not fsm.is_terminal:
            raise RuntimeError(f"commit-and-push for {repo.name} stopped in {fsm.state}")
        result.state = fsm.state
        result.ok = fsm.succeeded
        if fsm.state not in ("clean", "status_failed"):
            # The tree may have changed; still under the same lock
            result.refresh = _refresh(config, repo)
        return result

    fsm.check_status()
    status = git.get_status_porcelain(repo.local_path, **kwargs)
    result.steps["status"] = status
    if not status.success:
        fsm.status_error()
        result.error = status.to_error("status")
        return finish()
    result.entries = git.parse_status(status.stdout)
    if not result.entries:
        fsm.found_clean()
        return finish()

    fsm.stage()
    staged = git.stage_all(repo.local_path, **kwargs)
    result.steps["stage"] = staged
    if not staged.success:
        fsm.stage_error()
        result.error = staged.to_error("stage")
        return finish()

    fsm.commit()
    committed = git.commit(repo.local_path, message, **kwargs)
    result.steps["commit"] = committed
    if not committed.success:
        if is_nothing_to_commit(committed):
            fsm.nothing_staged()
        else:
            fsm.commit_error()
            result.error = committed.to_error("commit")
        return finish()

    fsm.push()
    pushed = git.push(repo.local_path, timeout=config.push_timeout, git_binary=config.git_binary)
    result.steps["push"] = pushed
    if not pushed.success:
        fsm.push_error()
        result.error = pushed.to_error("push")
        return finish()

    fsm.push_ok()
    return finish()


def commit_and_push(
    config: SyncConfig,
    ref: RepositoryRef,
    message: str,
    on_transition: Callable[[str, str, str], None] | None = None,
) -> PushOutcome:
    """
    Stage everything, commit with message and push, stopping at the first failure.

    Terminal states: clean (nothing to do), status_failed, stage_failed,
    nothing_to_commit (success), commit_failed, push_failed, pushed.
    """
    if not message or not message.strip():
        return PushOutcome(name=ref.name, error=_precondition("Commit message is empty"))
    return _run_locked(
        config, ref, PushOutcome,
        lambda repo: _commit_and_push(config, repo, message, on_transition),
    )
