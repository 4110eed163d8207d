"""Advisory per-name locks so two phantom processes cannot mutate the same worktree."""

import os
from contextlib import contextmanager
from typing import Iterator

from git_phantom.constants import LOCKS_SUBDIR
from git_phantom.logging_config import get_logger

# Import fcntl for POSIX file locking (Unix/Linux/macOS)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

logger = get_logger(__name__)


def lock_path(git_root: str, name: str) -> str:
    return os.path.join(git_root, LOCKS_SUBDIR, f"{name}.lock")


@contextmanager
def worktree_lock(git_root: str, name: str) -> Iterator[bool]:
    """Try to take the exclusive lock for ``name`` without blocking.

    Yields:
        True when the lock is held, False when another process holds it.
        The name must already be validated.
    """
    if not HAS_FCNTL:
        logger.debug("File locking not available on this platform")
        yield True
        return

    path = lock_path(git_root, name)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    # Lock files are left in place; unlinking them would race with other lockers
    with open(path, "a") as handle:
        try:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            logger.debug(f"Lock for '{name}' is held by another process")
            yield False
            return

        logger.debug(f"Acquired lock for '{name}'")
        try:
            yield True
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
            logger.debug(f"Released lock for '{name}'")
