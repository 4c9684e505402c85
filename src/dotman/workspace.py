"""Workspace orchestrator: relocates files and keeps the mapping table in step."""

from __future__ import annotations

import contextlib
import os
import shutil
import subprocess
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from dotman.errors import DotmanError, DuplicateKeyError, InvalidDestinationError, InvalidSourceError, NotManagedError
from dotman.infrastructure.config import GIT_EXECUTABLE, WorkspaceConfig
from dotman.infrastructure.logger import logger
from dotman.lock import acquire_lock, release_lock
from dotman.mappings import MappingStore
from dotman.paths import normalize_path
from dotman.types import LinkResult, LinkStage, MappingEntry, PassthroughResult, UnlinkResult, UnlinkStage

if TYPE_CHECKING:
    from collections.abc import Iterator


class Workspace:
    """Composes the workspace configuration with its mapping store.

    Link and unlink are multi-step and are not rolled back on failure; the
    returned result names the last step that completed.
    """

    def __init__(self, config: WorkspaceConfig, store: MappingStore) -> None:
        self.config = config
        self.store = store
        self._closed = False

    @property
    def root(self) -> Path:
        return self.config.root

    @classmethod
    @contextlib.contextmanager
    def session(cls, config: WorkspaceConfig) -> Iterator[Workspace]:
        """Open the workspace for one invocation.

        The mapping table is written back exactly once when the block exits,
        whether it returns normally or raises.
        """
        logger.debug("Workspace", root=str(config.root))
        if not config.root.exists():
            logger.debug("Creating workspace", root=str(config.root))
            config.root.mkdir(parents=True, exist_ok=True)

        acquire_lock(config.lock_path)
        try:
            store = MappingStore.read(config.root, config.mappings_path, home=config.home)
            workspace = cls(config, store)
            try:
                yield workspace
            finally:
                workspace.close()
        finally:
            release_lock(config.lock_path)

    def close(self) -> None:
        """Persist the mapping table. Later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        logger.debug("Saving mappings", path=str(self.config.mappings_path), count=len(self.store))
        self.store.write(self.config.mappings_path)

    def _destination_path(self, dest: str) -> Path:
        """Resolve ``dest`` inside the workspace root, rejecting escapes."""
        if PurePath(dest).is_absolute():
            raise InvalidDestinationError(f"Destination must be relative to the workspace: {dest}")
        resolved = normalize_path(self.root / dest)
        root = normalize_path(self.root)
        if resolved == root or not resolved.is_relative_to(root):
            raise InvalidDestinationError(f"Destination escapes the workspace: {dest}")
        if resolved.exists() or resolved.is_symlink():
            raise InvalidDestinationError(f"Destination already exists: {resolved}")
        return resolved

    def link(self, source: str | os.PathLike[str], dest: str) -> LinkResult:
        """Move ``source`` to ``<root>/<dest>`` and leave a symlink in its place."""
        source_path = Path(source)
        dest_abs = self.root / dest
        log = logger.bind(operation="link", source=str(source_path), destination=str(dest_abs))
        stage = LinkStage.PENDING

        try:
            if not source_path.exists():
                raise InvalidSourceError(f"Source file does not exist: {source_path}")
            if source_path.is_symlink() or not source_path.is_file():
                raise InvalidSourceError(f"Source file is not a regular file: {source_path}")
            if self.store.contains(source_path):
                raise DuplicateKeyError(self.store.key_for(source_path))
            dest_abs = self._destination_path(dest)
            stage = LinkStage.VALIDATED

            log.debug("Creating parent directories")
            dest_abs.parent.mkdir(parents=True, exist_ok=True)

            log.debug("Updating entries")
            self.store.add(source_path, dest)
            stage = LinkStage.REGISTERED

            log.debug("Moving file into workspace")
            shutil.move(str(source_path), str(dest_abs))
            stage = LinkStage.RELOCATED

            log.debug("Creating symbolic link")
            source_path.symlink_to(dest_abs)
            stage = LinkStage.LINKED
        except (DotmanError, OSError) as err:
            log.error("Link failed", stage=stage.value, error_type=type(err).__name__, error=str(err))
            return LinkResult(
                success=False,
                source=str(source_path),
                destination=str(dest_abs),
                stage=stage,
                error_type=type(err).__name__,
                error=str(err),
            )

        log.info("Linked")
        return LinkResult(success=True, source=str(source_path), destination=str(dest_abs), stage=stage)

    def unlink(self, source: str | os.PathLike[str]) -> UnlinkResult:
        """Put the relocated file back at ``source`` and forget the mapping."""
        source_path = Path(source)
        log = logger.bind(operation="unlink", source=str(source_path))
        stage = UnlinkStage.PENDING
        target: Path | None = None

        try:
            if not source_path.exists():
                raise InvalidSourceError(f"Source file does not exist: {source_path}")
            if not self.store.contains(source_path):
                raise NotManagedError(self.store.key_for(source_path))
            if not source_path.is_symlink():
                raise InvalidSourceError(f"Source file is not a symlink: {source_path}")
            stage = UnlinkStage.VALIDATED

            target = source_path.readlink()
            if not target.is_absolute():
                target = source_path.parent / target
            expected = self.store.resolve(source_path)
            if normalize_path(target) != normalize_path(expected):
                log.warning("Symlink target differs from recorded destination", target=str(target), expected=str(expected))

            log.debug("Removing symbolic link")
            source_path.unlink()
            stage = UnlinkStage.DETACHED

            log.debug("Moving file out of workspace", target=str(target))
            shutil.move(str(target), str(source_path))
            stage = UnlinkStage.RESTORED

            log.debug("Updating entries")
            self.store.remove(source_path)
            stage = UnlinkStage.UNREGISTERED
        except (DotmanError, OSError) as err:
            log.error("Unlink failed", stage=stage.value, error_type=type(err).__name__, error=str(err))
            return UnlinkResult(
                success=False,
                source=str(source_path),
                target=str(target) if target is not None else None,
                stage=stage,
                error_type=type(err).__name__,
                error=str(err),
            )

        log.info("Unlinked")
        return UnlinkResult(success=True, source=str(source_path), target=str(target), stage=stage)

    def status(self) -> list[MappingEntry]:
        """Print every mapping in stored order and return them."""
        entries = self.store.entries()
        print(f"There are {len(entries)} mapped files.")
        print("===========================")
        for counter, entry in enumerate(entries, start=1):
            print(f"{counter}. {entry.key} -> {entry.relocated_path}")
        print("===========================")
        return entries

    def where(self, source: str | os.PathLike[str]) -> Path | None:
        """Print the absolute relocated path recorded for ``source``."""
        try:
            relocated = self.store.resolve(source)
        except DotmanError as err:
            logger.error("Lookup failed", operation="where", source=str(source), error=str(err))
            return None
        print(relocated)
        return relocated

    def git(self, args: list[str]) -> PassthroughResult:
        """Run git inside the workspace with inherited standard streams."""
        command = [GIT_EXECUTABLE, *args]
        logger.debug("Executing", command=" ".join(command), cwd=str(self.root))
        try:
            completed = subprocess.run(command, cwd=self.root, check=False)
        except OSError as err:
            logger.error("Failed to execute process", operation="git", error=str(err))
            return PassthroughResult(success=False, error=str(err))

        print()
        if completed.returncode < 0:
            print(f"Process terminated by signal {-completed.returncode}")
            return PassthroughResult(success=False, signal=-completed.returncode)
        print(f"Process exited with code {completed.returncode}")
        return PassthroughResult(success=completed.returncode == 0, exit_code=completed.returncode)

    def restore(self) -> None:
        raise NotImplementedError("restore is not implemented")
