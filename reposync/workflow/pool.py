"""Run one sync operation across several repositories in parallel.

Operations on different repositories share no state, so they run on a
thread pool. Per-repository locks (see runner/locking.py) keep operations
on the same working copy serialized even when they land on two workers.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable

from reposync.lib.config import SyncConfig
from reposync.lib.types import RepositoryRef
from reposync.workflow.sync import SyncResult

logger = logging.getLogger(__name__)

Operation = Callable[..., SyncResult]


def sync_many(
    config: SyncConfig,
    refs: list[RepositoryRef],
    operation: Operation,
    *args,
    max_workers: int | None = None,
) -> dict[str, SyncResult]:
    """
    Run operation(config, ref, *args) for every ref.

    Returns:
        Results keyed by repository name, in the order of refs.
        Exceptions raised by an operation propagate to the caller.
    """
    if not refs:
        return {}

    workers = max_workers or config.max_workers
    op_name = getattr(operation, "__name__", "operation")
    logger.info(f"[POOL] {op_name} on {len(refs)} repositories ({workers} workers)")

    results: dict[str, SyncResult] = {}
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reposync") as pool:
        futures = {pool.submit(operation, config, ref, *args): ref for ref in refs}
        for future in as_completed(futures):
            ref = futures[future]
            results[ref.name] = future.result()
            logger.debug(f"[POOL] {op_name} finished for {ref.name}")

    return {ref.name: results[ref.name] for ref in refs if ref.name in results}
