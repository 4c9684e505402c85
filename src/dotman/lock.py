"""Advisory lock file guarding a workspace against concurrent sessions."""

from __future__ import annotations

import contextlib
import json
import os
import time
from typing import TYPE_CHECKING

from dotman.errors import LockError
from dotman.infrastructure.logger import logger

if TYPE_CHECKING:
    from pathlib import Path

STALE_TIMEOUT_S = 5 * 60  # 5 minutes


class LockInfo:
    def __init__(self, pid: int, timestamp: float) -> None:
        self.pid = pid
        self.timestamp = timestamp

    def to_dict(self) -> dict[str, int | float]:
        return {"pid": self.pid, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: dict[str, int | float]) -> LockInfo:
        return cls(pid=int(data["pid"]), timestamp=float(data["timestamp"]))


def _is_stale(lock: LockInfo) -> bool:
    return time.time() - lock.timestamp > STALE_TIMEOUT_S


def _is_process_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _read_lock(lock_path: Path) -> LockInfo | None:
    try:
        return LockInfo.from_dict(json.loads(lock_path.read_text(encoding="utf-8")))
    except (OSError, ValueError, KeyError, TypeError):
        return None


def _create_lock(lock_path: Path, lock_info: LockInfo) -> None:
    # O_EXCL makes creation fail if the file already exists
    fd = os.open(str(lock_path), os.O_WRONLY | os.O_CREAT | os.O_EXCL)
    try:
        os.write(fd, json.dumps(lock_info.to_dict()).encode())
    finally:
        os.close(fd)


def acquire_lock(lock_path: Path) -> None:
    """Take the workspace lock, replacing it if stale or left by a dead process."""
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    lock_info = LockInfo(pid=os.getpid(), timestamp=time.time())

    try:
        _create_lock(lock_path, lock_info)
        return
    except FileExistsError:
        pass

    existing = _read_lock(lock_path)
    if existing is not None and not _is_stale(existing) and _is_process_alive(existing.pid):
        ts_iso = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(existing.timestamp))
        raise LockError(
            f"Workspace in use (pid {existing.pid}, started {ts_iso}). If this is stale, delete {lock_path}"
        )

    logger.warning("Replacing stale workspace lock", path=str(lock_path))
    with contextlib.suppress(FileNotFoundError):
        lock_path.unlink()

    try:
        _create_lock(lock_path, lock_info)
    except FileExistsError as err:
        raise LockError("Lock contention: another process acquired the workspace lock. Retry.") from err


def release_lock(lock_path: Path) -> None:
    """Release the lock if it belongs to the current process."""
    if not lock_path.exists():
        return
    lock = _read_lock(lock_path)
    if lock is None or lock.pid == os.getpid():
        with contextlib.suppress(FileNotFoundError):
            lock_path.unlink()
