"""File locking utilities used to serialize builds."""
from __future__ import annotations

import fcntl
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .core import ensure_directory

_THREAD_MUTEXES: dict[str, threading.Lock] = {}
_THREAD_MUTEXES_GUARD = threading.Lock()

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_POLL_INTERVAL_SECONDS = 0.1


class LockTimeoutError(TimeoutError):
    """Raised when an OS file lock cannot be acquired within timeout."""


def _thread_mutex(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _THREAD_MUTEXES_GUARD:
        lock = _THREAD_MUTEXES.get(key)
        if lock is None:
            lock = _THREAD_MUTEXES.setdefault(key, threading.Lock())
    return lock


@contextmanager
def acquire_file_lock(
    file_path: Path | str,
    timeout: Optional[float] = None,
    *,
    poll_interval: Optional[float] = None,
) -> Iterator[object]:
    """Acquire an exclusive lock on ``<file_path>.lock`` with a timeout.

    - Uses ``fcntl.flock`` with ``LOCK_EX | LOCK_NB`` (non-blocking) in a retry loop.
    - A sidecar ``.lock`` file is the lock target, so ``file_path`` itself may be
      a directory or not exist yet.
    - Threads in the same process are serialized by an in-process mutex first,
      since ``flock`` locks are per open file description.

    Args:
        file_path: Path being protected.
        timeout: Maximum seconds to wait before raising ``LockTimeoutError``.
        poll_interval: Sleep duration between non-blocking attempts.

    Yields:
        The opened lock file object, kept locked for the duration of the context.
    """
    effective_timeout = DEFAULT_TIMEOUT_SECONDS if timeout is None else timeout
    effective_poll_interval = (
        DEFAULT_POLL_INTERVAL_SECONDS if poll_interval is None else poll_interval
    )
    _validate_positive("timeout", effective_timeout)
    _validate_positive("poll_interval", effective_poll_interval)

    start = time.time()
    target = Path(file_path)
    lock_target = target.with_name(target.name + ".lock")
    ensure_directory(lock_target.parent)

    mutex = _thread_mutex(lock_target)
    if not mutex.acquire(timeout=effective_timeout):
        raise LockTimeoutError(
            f"Could not acquire lock on {target} within {effective_timeout}s"
        )

    try:
        fh = open(lock_target, "a+")
        try:
            while True:
                try:
                    fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except OSError:
                    if (time.time() - start) >= effective_timeout:
                        raise LockTimeoutError(
                            f"Could not acquire lock on {target} within {effective_timeout}s"
                        )
                    time.sleep(effective_poll_interval)
            try:
                yield fh
            finally:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
        finally:
            fh.close()
    finally:
        mutex.release()


def _validate_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ValueError(f"{name} must be positive (got {value})")


__all__ = [
    "LockTimeoutError",
    "acquire_file_lock",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_POLL_INTERVAL_SECONDS",
]
