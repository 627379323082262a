"""
Exclusion Locks
===============

Serializes regeneration of the root manifest across processes.

ExclusionLock is the injectable abstraction; FileLock implements it with
lock files created exclusively (O_CREAT | O_EXCL) and NullLock always
succeeds. Waiting is bounded: when the bound expires LockTimeoutError is
raised and the caller may retry later.

A lock file whose owner process has exited, or which is older than
``stale_after`` seconds, is stale: it is removed and acquisition retried.
"""

import os
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, Set, Union

from rootpack_common import Defaults, LockTimeoutError
from rootpack_common.logger import get_logger

logger = get_logger(__name__)


class ExclusionLock:
    """Interface of named, time-bounded mutual exclusion."""

    def acquire(self, name: str, timeout: float = Defaults.LOCK_TIMEOUT) -> bool:
        """Try to acquire ``name`` within ``timeout`` seconds."""
        raise NotImplementedError

    def release(self, name: str) -> None:
        raise NotImplementedError

    @contextmanager
    def hold(self, name: str, timeout: float = Defaults.LOCK_TIMEOUT) -> Iterator[None]:
        """
        Hold ``name`` for the duration of the block.

        Raises:
            LockTimeoutError: If the lock is not acquired within ``timeout``
        """
        if not self.acquire(name, timeout):
            raise LockTimeoutError(name, timeout)
        try:
            yield
        finally:
            self.release(name)


class NullLock(ExclusionLock):
    """Always succeeds; for single-process use."""

    def acquire(self, name: str, timeout: float = Defaults.LOCK_TIMEOUT) -> bool:
        return True

    def release(self, name: str) -> None:
        pass


class FileLock(ExclusionLock):
    """
    Lock files in a directory, one per lock name.

    Args:
        directory: Where lock files are created
        poll_interval: Seconds between acquisition attempts
        clock: Monotonic clock, injectable for tests
        sleep: Sleep function, injectable for tests
        stale_after: Age in seconds after which an existing lock file is
                     considered abandoned
    """

    def __init__(
        self,
        directory: Union[str, Path],
        poll_interval: float = Defaults.LOCK_POLL_INTERVAL,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], None]] = None,
        stale_after: float = Defaults.LOCK_TIMEOUT,
    ):
        self.directory = Path(directory)
        self.poll_interval = poll_interval
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep
        self.stale_after = stale_after
        self._held: Set[str] = set()

    def lock_path(self, name: str) -> Path:
        return self.directory / f".rootpack-{name}.lock"

    def acquire(self, name: str, timeout: float = Defaults.LOCK_TIMEOUT) -> bool:
        path = self.lock_path(name)
        deadline = self._clock() + timeout
        while True:
            try:
                fd = os.open(str(path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
            except FileExistsError:
                if self._break_stale(name, path):
                    continue
                if self._clock() >= deadline:
                    logger.warning("Timed out waiting for lock", lock=name, timeout=timeout)
                    return False
                self._sleep(self.poll_interval)
                continue
            with os.fdopen(fd, "w") as f:
                f.write(str(os.getpid()))
            self._held.add(name)
            logger.debug("Acquired lock", lock=name, path=str(path))
            return True

    def release(self, name: str) -> None:
        if name not in self._held:
            return
        self._held.discard(name)
        try:
            self.lock_path(name).unlink()
        except FileNotFoundError:
            logger.warning("Lock file already removed", lock=name)
        logger.debug("Released lock", lock=name)

    def _break_stale(self, name: str, path: Path) -> bool:
        """Remove ``path`` if it was left behind; True when it was removed."""
        try:
            owner = path.read_text().strip()
            age = time.time() - path.stat().st_mtime
        except FileNotFoundError:
            # Released between our open and read.
            return True

        reason = None
        if owner.isdigit() and not _process_alive(int(owner)):
            reason = "owner exited"
        elif age > self.stale_after:
            reason = "expired"
        if reason is None:
            return False

        logger.warning("Removing stale lock", lock=name, owner=owner or None, age=round(age, 1), reason=reason)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        return True


def _process_alive(pid: int) -> bool:
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but belongs to another user.
        return True
    except OverflowError:
        return False
    return True
