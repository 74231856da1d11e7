"""
reposync check / check-all - Fetch and report ahead/behind counts.
"""

from reposync.commands.output import print_error, truncate_output
from reposync.lib import paths
from reposync.lib.config import SyncConfig
from reposync.lib.types import PreconditionFailure, RepositoryRef
from reposync.workflow import sync
from reposync.workflow.pool import sync_many


def print_update_check(result: sync.UpdateCheckResult) -> None:
    if result.divergence is not None:
        d = result.divergence
        status = " (up to date)" if d.up_to_date else ""
        print(f"{result.name} [{d.branch}]: Behind: {d.behind} Ahead: {d.ahead}{status}")
        if result.fetch_error:
            print(f"  remote refs may be stale: {result.fetch_error.message}")
        return
    print(f"{result.name} [{result.branch or '?'}]: no ahead/behind count")
    if result.fallback_reason:
        print(f"  {result.fallback_reason.message}")
    if result.fallback_text:
        print(truncate_output(result.fallback_text))


def cmd_check(args, config: SyncConfig, ref: RepositoryRef) -> int:
    """Check one repository for remote updates."""
    result = sync.check_updates(config, ref)
    if result.error:
        print_error(result)
        if result.fallback_text:
            print(truncate_output(result.fallback_text))
        return 1
    print_update_check(result)
    return 0


def _present(config: SyncConfig, ref: RepositoryRef) -> bool:
    try:
        return paths.local_repository(config.base_dir, ref).present
    except PreconditionFailure:
        return False


def cmd_check_all(args, config: SyncConfig, refs: list[RepositoryRef]) -> int:
    """Check every locally present repository, in parallel."""
    local = [ref for ref in refs if _present(config, ref)]
    if not local:
        print("No local repositories to check.")
        return 0

    results = sync_many(config, local, sync.check_updates)
    failed = 0
    for result in results.values():
        if result.error:
            failed += 1
            print_error(result)
        else:
            print_update_check(result)
    return 1 if failed else 0
