"""Tests for the workspace lock file."""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING

import pytest

from dotman.errors import LockError
from dotman.lock import acquire_lock, release_lock

if TYPE_CHECKING:
    from pathlib import Path


class TestLock:
    @pytest.fixture(autouse=True)
    def _setup(self, tmp_path: Path) -> None:
        self.lock_path = tmp_path / ".dotfiles.lock"

    def _owner(self) -> int:
        return json.loads(self.lock_path.read_text())["pid"]

    def test_acquire_creates_lock_file(self) -> None:
        acquire_lock(self.lock_path)
        assert self.lock_path.exists()
        assert self._owner() == os.getpid()
        release_lock(self.lock_path)

    def test_release_removes_lock_file(self) -> None:
        acquire_lock(self.lock_path)
        release_lock(self.lock_path)
        assert not self.lock_path.exists()

    def test_second_acquire_while_held_fails(self) -> None:
        acquire_lock(self.lock_path)
        with pytest.raises(LockError):
            acquire_lock(self.lock_path)
        release_lock(self.lock_path)

    def test_acquire_after_release_succeeds(self) -> None:
        acquire_lock(self.lock_path)
        release_lock(self.lock_path)
        acquire_lock(self.lock_path)
        assert self._owner() == os.getpid()
        release_lock(self.lock_path)

    def test_stale_lock_is_replaced(self) -> None:
        self.lock_path.write_text(json.dumps({"pid": os.getpid(), "timestamp": 0}))
        acquire_lock(self.lock_path)
        assert json.loads(self.lock_path.read_text())["timestamp"] > 0
        release_lock(self.lock_path)

    def test_corrupt_lock_is_replaced(self) -> None:
        self.lock_path.write_text("not json")
        acquire_lock(self.lock_path)
        assert self._owner() == os.getpid()
        release_lock(self.lock_path)

    def test_release_keeps_foreign_lock(self) -> None:
        self.lock_path.write_text(json.dumps({"pid": os.getpid() + 1, "timestamp": 0}))
        release_lock(self.lock_path)
        assert self.lock_path.exists()

    def test_release_without_lock_file_is_a_no_op(self) -> None:
        release_lock(self.lock_path)
        assert not self.lock_path.exists()
