"""
reposync diff - Show git's diff for one file in a working copy.
"""

import sys

from reposync.commands.output import print_error
from reposync.lib.config import SyncConfig
from reposync.lib.types import ChangeEntry, RepositoryRef
from reposync.workflow import sync


def cmd_diff(args, config: SyncConfig, ref: RepositoryRef) -> int:
    # Accept a path copied from a rename line ("old -> new") of the refresh listing
    path = ChangeEntry(status_code="", path=args.path).target_path
    result = sync.show_diff(config, ref, path)
    if not result.ok:
        print_error(result)
        return 1

    if not result.diff_text:
        print(f"No unstaged changes in {path}")
        return 0
    sys.stdout.write(result.diff_text)
    return 0
