"""
reposync refresh - Show changed files in a working copy.
"""

from reposync.commands.output import print_entries, print_error
from reposync.lib.config import SyncConfig
from reposync.lib.types import RepositoryRef
from reposync.workflow import sync


def cmd_refresh(args, config: SyncConfig, ref: RepositoryRef) -> int:
    result = sync.refresh_local_state(config, ref)
    if not result.ok:
        print_error(result)
        return 1
    print_entries(ref.name, result.entries)
    return 0
