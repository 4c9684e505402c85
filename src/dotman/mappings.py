"""Persistent table of canonical source keys to relocated workspace paths."""

from __future__ import annotations

import json
from pathlib import Path, PurePath
from typing import IO, TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from dotman.errors import DuplicateKeyError, InvalidDestinationError, NotFoundError, NotMappedError, ParseError
from dotman.paths import canonical_key
from dotman.types import MappingEntry

if TYPE_CHECKING:
    import os

_TABLE_ADAPTER: TypeAdapter[dict[str, str]] = TypeAdapter(dict[str, str])


class MappingStore:
    """Ordered ``canonical key -> relocated path`` table for one workspace.

    Relocated paths are stored relative to the workspace root so the
    workspace directory can be moved without rewriting the table.
    """

    def __init__(self, workspace: Path, entries: dict[str, str] | None = None, home: Path | None = None) -> None:
        self.workspace = workspace
        self.home = home
        self._entries: dict[str, str] = dict(sorted((entries or {}).items()))

    @classmethod
    def load(cls, workspace: Path, reader: IO[str] | IO[bytes], home: Path | None = None) -> MappingStore:
        """Parse a table from a JSON object of string pairs."""
        try:
            entries = _TABLE_ADAPTER.validate_json(reader.read(), strict=True)
        except (ValidationError, UnicodeDecodeError) as err:
            raise ParseError(f"Malformed mapping table: {err}") from err
        return cls(workspace, entries, home=home)

    @classmethod
    def read(cls, workspace: Path, path: Path, home: Path | None = None) -> MappingStore:
        """Load the table at ``path``, or start an empty one if it is absent."""
        if not path.exists():
            return cls(workspace, home=home)
        with path.open("rb") as reader:
            return cls.load(workspace, reader, home=home)

    def save(self, writer: IO[str]) -> None:
        """Serialize as pretty-printed JSON with sorted keys."""
        writer.write(json.dumps(self._entries, indent=2, sort_keys=True, ensure_ascii=False))

    def write(self, path: Path) -> None:
        """Atomically replace the table file at ``path``."""
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as writer:
            self.save(writer)
        tmp_path.replace(path)

    def key_for(self, src_path: str | os.PathLike[str]) -> str:
        return canonical_key(src_path, home=self.home)

    def add(self, src_path: str | os.PathLike[str], dest_relative: str) -> str:
        """Register ``src_path`` as relocated to ``dest_relative``. Returns the key."""
        if PurePath(dest_relative).is_absolute():
            raise InvalidDestinationError(f"Destination must be relative to the workspace: {dest_relative}")
        key = self.key_for(src_path)
        if key in self._entries:
            raise DuplicateKeyError(key)
        self._entries[key] = dest_relative
        self._entries = dict(sorted(self._entries.items()))
        return key

    def remove(self, src_path: str | os.PathLike[str]) -> None:
        key = self.key_for(src_path)
        if key not in self._entries:
            raise NotFoundError(key)
        del self._entries[key]

    def contains(self, src_path: str | os.PathLike[str]) -> bool:
        return self.key_for(src_path) in self._entries

    def resolve(self, src_path: str | os.PathLike[str]) -> Path:
        """Return the absolute path of the relocated file for ``src_path``."""
        key = self.key_for(src_path)
        try:
            return self.workspace / self._entries[key]
        except KeyError:
            raise NotMappedError(key) from None

    def entries(self) -> list[MappingEntry]:
        return [MappingEntry(key=key, relocated_path=value) for key, value in self._entries.items()]

    def as_dict(self) -> dict[str, str]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
