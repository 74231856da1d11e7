"""
reposync pull - Pull a working copy and show its state afterwards.
"""

from reposync.commands.output import print_entries, print_error, truncate_output
from reposync.lib.config import SyncConfig
from reposync.lib.types import RepositoryRef
from reposync.workflow import sync


def cmd_pull(args, config: SyncConfig, ref: RepositoryRef) -> int:
    result = sync.pull(config, ref)
    if result.outcome is not None and result.outcome.output:
        print(truncate_output(result.outcome.output))

    if not result.ok:
        print_error(result)
        return 1

    if result.refresh is not None:
        if result.refresh.ok:
            print_entries(ref.name, result.refresh.entries)
        else:
            print_error(result.refresh)
    return 0
