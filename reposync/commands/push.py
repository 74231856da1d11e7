"""
reposync push - Commit all local changes and push them.
"""

from reposync.commands.output import print_entries, print_error, truncate_output
from reposync.lib.config import SyncConfig
from reposync.lib.types import RepositoryRef
from reposync.workflow import sync

STATE_MESSAGES = {
    "clean": "Nothing to push",
    "nothing_to_commit": "Nothing to commit",
    "pushed": "Pushed",
}


def cmd_push(args, config: SyncConfig, ref: RepositoryRef) -> int:
    result = sync.commit_and_push(config, ref, args.message)

    if result.outcome is not None and result.outcome.output:
        print(truncate_output(result.outcome.output))

    if not result.ok:
        print_error(result)
        print(f"  stopped at: {result.state}")
        return 1

    print(f"{ref.name}: {STATE_MESSAGES.get(result.state, result.state)}")
    if result.refresh is not None and result.refresh.ok:
        print_entries(ref.name, result.refresh.entries)
    return 0
