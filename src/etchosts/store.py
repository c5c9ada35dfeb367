"""Physical access to a hosts file.

Every read-modify-write cycle runs under a lock scoped to the file path. Threads
of one process queue on a per-path threading.Lock, and independent processes
queue on an flock held on a ``<path>.lock`` sidecar. The sidecar is needed
because writes replace the target inode, which would drop a lock held on the
target itself.

New content is written to a temporary file in the same directory and renamed
over the target, so readers only ever see a complete file.
"""

import contextlib
import fcntl
import os
import shutil
import tempfile
import threading
import weakref
from pathlib import Path
from typing import Callable, Iterable, Iterator, List

from etchosts import config
from etchosts.constants import ENCODING, ENCODING_ERRORS, LINE_TERMINATOR
from etchosts.logger import logger

_registry_lock = threading.Lock()
# Entries go away once no caller holds the lock object.
_path_locks: "weakref.WeakValueDictionary[Path, threading.Lock]" = weakref.WeakValueDictionary()


def _reset_locks() -> None:
    """Drops locks inherited from the parent, which may have been held by other threads."""
    global _registry_lock, _path_locks
    _registry_lock = threading.Lock()
    _path_locks = weakref.WeakValueDictionary()


if hasattr(os, "register_at_fork"):
    os.register_at_fork(after_in_child=_reset_locks)


def _thread_lock(path: Path) -> threading.Lock:
    """Returns the in-process lock for an already resolved path."""
    with _registry_lock:
        lock = _path_locks.get(path)
        if lock is None:
            lock = threading.Lock()
            _path_locks[path] = lock
        return lock


def lock_path_for(path: Path) -> Path:
    return path.with_name(path.name + config.LOCK_SUFFIX)


@contextlib.contextmanager
def locked(path: str | Path) -> Iterator[Path]:
    """Holds the exclusive lock for path, creating the file if it is missing.

    Yields the resolved path. The lock is released however the block exits.
    """
    target = Path(path).resolve()
    with _thread_lock(target):
        with open(lock_path_for(target), "a") as lock_file:
            fcntl.flock(lock_file, fcntl.LOCK_EX)
            logger.debug(f"Acquired lock on {target}")
            try:
                if not target.exists():
                    open(target, "a", encoding=ENCODING).close()
                yield target
            finally:
                fcntl.flock(lock_file, fcntl.LOCK_UN)
                logger.debug(f"Released lock on {target}")


def read_lines(path: Path) -> List[str]:
    """Returns the file content split into lines, terminators kept."""
    with open(path, "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline=LINE_TERMINATOR) as f:
        return f.readlines()


def _fsync_dir(directory: Path) -> None:
    """Makes a rename inside directory durable."""
    dir_fd = os.open(directory, os.O_RDONLY)
    try:
        os.fsync(dir_fd)
    finally:
        os.close(dir_fd)


def atomic_write(path: Path, lines: Iterable[str]) -> None:
    """Replaces the content of path with lines via a temp file + os.replace()."""
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
            f.writelines(lines)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            shutil.copymode(path, tmp)
        os.replace(tmp, path)
        _fsync_dir(path.parent)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp)
        raise


def with_lock(path: str | Path, fn: Callable[[List[str]], Iterable[str]]) -> None:
    """Runs one read-modify-write cycle on path.

    fn receives the current lines and returns the lines to write back. If fn
    raises, nothing is written.
    """
    try:
        with locked(path) as target:
            lines = list(fn(read_lines(target)))
            atomic_write(target, lines)
            logger.debug(f"Wrote {len(lines)} lines to {target}")
    except OSError as e:
        logger.error(f"Error writing hosts file {path}: {e}")
        raise


def read(path: str | Path) -> List[str]:
    """Returns the current lines of path without modifying it."""
    try:
        with locked(path) as target:
            return read_lines(target)
    except OSError as e:
        logger.error(f"Error reading hosts file {path}: {e}")
        raise
