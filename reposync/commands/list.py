"""
reposync list - List repositories and their local state.
"""

from reposync.lib import paths
from reposync.lib.config import SyncConfig
from reposync.lib.types import PreconditionFailure, RepositoryRef
from reposync.runner.locking import is_repo_locked


def discover_local_refs(config: SyncConfig) -> list[RepositoryRef]:
    """Working copies found under base_dir, for use without a listing file."""
    if not config.base_dir.is_dir():
        return []
    return [
        RepositoryRef(name=d.name, remote_url="")
        for d in sorted(config.base_dir.iterdir())
        if d.is_dir() and (d / ".git").exists()
    ]


def cmd_list(args, config: SyncConfig, refs: list[RepositoryRef]) -> int:
    """List repositories with local presence and lock state."""
    if not refs:
        refs = discover_local_refs(config)

    print(f"Base directory: {config.base_dir}")
    if not refs:
        print("Repositories: none")
        return 0

    print("Repositories")
    print("-" * 60)
    for ref in refs:
        try:
            repo = paths.local_repository(config.base_dir, ref)
        except PreconditionFailure as e:
            print(f"  {ref.name:<30} invalid   {e}")
            continue
        state = "local" if repo.present else "missing"
        if is_repo_locked(config.locks_path, repo.local_path):
            state += " (busy)"
        url = ref.remote_url or "-"
        print(f"  {ref.name:<30} {state:<14} {url}")
    return 0
