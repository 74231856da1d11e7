"""
reposync clone - Clone repositories into the base directory.
"""

from reposync.lib.config import SyncConfig
from reposync.lib.types import RepositoryRef
from reposync.workflow import sync
from reposync.workflow.pool import sync_many


def cmd_clone(args, config: SyncConfig, refs: list[RepositoryRef]) -> int:
    """Clone each selected repository. Existing copies are skipped."""
    if len(refs) == 1:
        results = {refs[0].name: sync.clone(config, refs[0])}
    else:
        results = sync_many(config, refs, sync.clone)

    failed = 0
    for name, result in results.items():
        if result.ok:
            print(f"Cloned {name} -> {result.local_path}")
        elif result.already_exists:
            print(f"Already exists: {result.local_path}")
        else:
            failed += 1
            print(f"ERROR: Clone failed for {name}")
            if result.error:
                print(f"  {result.error.message}")

    return 1 if failed else 0
