"""Exclusive lock over a recycle directory.

The lock is an advisory flock(2) on the recycle directory itself, so it
adds no entry to the directory and is released automatically if the
process dies.
"""

import fcntl
import logging
import os
from pathlib import Path
from types import TracebackType

from saferm.recycle.errors import LockHeldError, StoreUnavailableError

logger = logging.getLogger(__name__)


class RecycleLock:
    """Context manager holding an exclusive lock on a recycle directory.

    Acquisition never waits: a lock held by another invocation raises
    LockHeldError immediately.
    """

    def __init__(self, root: Path) -> None:
        self._root = root
        self._fd: int | None = None

    @property
    def held(self) -> bool:
        """Whether this instance currently holds the lock."""
        return self._fd is not None

    def acquire(self) -> None:
        """Take the lock.

        Raises:
            StoreUnavailableError: If the directory cannot be opened.
            LockHeldError: If another process holds the lock.
        """
        try:
            fd = os.open(self._root, os.O_RDONLY | os.O_DIRECTORY)
        except OSError as e:
            msg = f"Cannot open recycle directory {self._root}: {e}"
            raise StoreUnavailableError(msg) from e

        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError as e:
            os.close(fd)
            msg = f"Recycle bin is in use by another process: {self._root}"
            raise LockHeldError(msg) from e
        except OSError:
            os.close(fd)
            raise

        logger.debug("Acquired lock on %s", self._root)
        self._fd = fd

    def release(self) -> None:
        """Release the lock if held."""
        if self._fd is None:
            return
        try:
            fcntl.flock(self._fd, fcntl.LOCK_UN)
        finally:
            os.close(self._fd)
            self._fd = None
        logger.debug("Released lock on %s", self._root)

    def __enter__(self) -> "RecycleLock":
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
