"""Advisory lock that keeps two updates off the same install target."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from types import TracebackType

from unvenv.logging import get_logger
from unvenv.updater.errors import InstallError, UpdateLockedError

log = get_logger("unvenv.updater.lock")

if sys.platform == "win32":
    import msvcrt

    def _try_lock(fd: int) -> bool:
        try:
            msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)
        except OSError:
            return False
        return True

    def _unlock(fd: int) -> None:
        os.lseek(fd, 0, os.SEEK_SET)
        msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)

else:
    import fcntl

    def _try_lock(fd: int) -> bool:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            return False
        return True

    def _unlock(fd: int) -> None:
        fcntl.flock(fd, fcntl.LOCK_UN)


def lock_path_for(target: Path) -> Path:
    return target.with_name(f"{target.name}.lock")


class InstallLock:
    """Non-blocking exclusive lock on ``<target>.lock``.

    The sentinel file is created on first use and never removed.

    Usage::

        with InstallLock(target):
            ...  # download, verify, install

    Raises ``UpdateLockedError`` when another process holds the lock and
    ``InstallError`` when the sentinel cannot be created.
    """

    def __init__(self, target: Path) -> None:
        self._path = lock_path_for(target)
        self._fd: int | None = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def locked(self) -> bool:
        return self._fd is not None

    def acquire(self) -> None:
        try:
            fd = os.open(self._path, os.O_RDWR | os.O_CREAT, 0o644)
        except PermissionError as exc:
            raise InstallError(
                "Permission denied. Try running with sudo or use --install-dir to specify a "
                f"writable location:\n  {exc}"
            ) from exc
        except OSError as exc:
            raise InstallError(f"Cannot create update lock {self._path}: {exc}") from exc

        if not _try_lock(fd):
            os.close(fd)
            raise UpdateLockedError(
                f"Another update is already running for {self._path.with_suffix('')}"
            )

        self._fd = fd
        log.debug("updater_lock_acquired", path=str(self._path))

    def release(self) -> None:
        # The sentinel is never unlinked so every contender locks the same inode.
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        try:
            _unlock(fd)
        finally:
            os.close(fd)
        log.debug("updater_lock_released", path=str(self._path))

    def __enter__(self) -> InstallLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
