"""
Lock management for reposync.

Uses flock for per-working-copy locking. Every sync operation holds the lock
for its local path from start to finish, so two operations on the same path
run one after the other while operations on different paths proceed in
parallel, even when two base directories hold a repository of the same
name. flock locks belong to the open file, so this serializes threads within
one process as well as separate processes.
"""

import atexit
import fcntl
import hashlib
import logging
import os
import time
from pathlib import Path
from contextlib import contextmanager

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05


class LockTimeout(Exception):
    """Lock acquisition timed out."""
    pass


def lock_file_for(lock_dir: Path, local_path: Path) -> Path:
    """Lock file guarding local_path: its directory name plus a digest of the full path."""
    digest = hashlib.sha1(str(Path(local_path).resolve()).encode()).hexdigest()[:16]
    return lock_dir / f"{Path(local_path).name}-{digest}.lock"


def is_repo_locked(lock_dir: Path, local_path: Path) -> bool:
    """Check whether an operation currently holds the lock for local_path."""
    lock_file = lock_file_for(lock_dir, local_path)
    if not lock_file.exists():
        return False

    try:
        fd = open(lock_file, 'r')
    except OSError:
        return False
    try:
        # Try non-blocking exclusive lock
        fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        # Got lock - means no one else has it, release immediately
        fcntl.flock(fd, fcntl.LOCK_UN)
        return False
    except BlockingIOError:
        return True
    finally:
        fd.close()


@contextmanager
def _acquire_lock(lock_file: Path, timeout: float, lock_name: str):
    """
    Internal helper to acquire a file lock.

    Args:
        lock_file: Path to the lock file
        timeout: Seconds to wait for lock; 0 or less waits forever
        lock_name: Human-readable name for error messages

    Lock files are never deleted: unlinking one while another waiter holds
    an fd on it lets two holders lock different inodes at the same path.
    """
    lock_file.parent.mkdir(parents=True, exist_ok=True)

    fd = open(lock_file, 'a')
    start = time.monotonic()
    waited = False

    while True:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            break
        except BlockingIOError:
            if timeout > 0 and time.monotonic() - start > timeout:
                fd.close()
                raise LockTimeout(f"Could not acquire {lock_name} within {timeout}s")
            if not waited:
                logger.info(f"[LOCK] waiting for {lock_name}")
                waited = True
            time.sleep(POLL_INTERVAL)

    def cleanup():
        try:
            fcntl.flock(fd, fcntl.LOCK_UN)
            fd.close()
        except (OSError, ValueError):
            pass

    atexit.register(cleanup)

    try:
        fd.truncate(0)
        fd.write(f"{os.getpid()}\n")
        fd.flush()
        logger.debug(f"[LOCK] acquired {lock_name}")
        yield
    finally:
        atexit.unregister(cleanup)
        cleanup()
        logger.debug(f"[LOCK] released {lock_name}")


@contextmanager
def repo_lock(lock_dir: Path, local_path: Path, timeout: float = 60):
    """
    Acquire the lock for one working copy, yield, release on exit.

    Raises:
        LockTimeout: if another operation holds the lock for longer than timeout
    """
    lock_file = lock_file_for(lock_dir, local_path)
    with _acquire_lock(lock_file, timeout, f"lock for {local_path}"):
        yield
