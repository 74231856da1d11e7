"""Output formatting shared by the reposync commands.

Separates display concerns from the orchestrator.
"""

from reposync.lib.types import ChangeEntry
from reposync.workflow.sync import SyncResult

MAX_OUTPUT_CHARS = 3000


def truncate_output(output: str, max_chars: int = MAX_OUTPUT_CHARS) -> str:
    """Truncate output, keeping start and end for context."""
    if len(output) <= max_chars:
        return output
    marker = "\n\n... [truncated] ...\n\n"
    available = max_chars - len(marker)
    head_chars = (available * 2) // 3
    tail_chars = available - head_chars
    return f"{output[:head_chars]}{marker}{output[-tail_chars:]}"


def print_error(result: SyncResult) -> None:
    """Print a failed result's reason."""
    if result.error is None:
        print(f"ERROR: {result.name}: failed")
        return
    print(f"ERROR: {result.name}: {result.error.message}")
    print(f"  ({result.error.kind.value})")


def format_entry(entry: ChangeEntry) -> str:
    code = entry.status_code or "  "
    return f"  {code:<2} {entry.path}  [{entry.kind.value}]"


def print_entries(name: str, entries: list[ChangeEntry]) -> None:
    if not entries:
        print(f"{name}: Working tree clean")
        return
    print(f"{name}: {len(entries)} changed file(s)")
    for entry in entries:
        print(format_entry(entry))
