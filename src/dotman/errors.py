"""Error taxonomy for dotman operations."""

from __future__ import annotations


class DotmanError(Exception):
    """Base class for every error raised by dotman itself."""


class ConfigError(DotmanError):
    """The home directory or workspace location cannot be determined."""


class ParseError(DotmanError):
    """The persisted mapping table is malformed."""


class DuplicateKeyError(DotmanError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Entry already exists: {key}")
        self.key = key


class NotFoundError(DotmanError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Entry does not exist: {key}")
        self.key = key


class NotMappedError(NotFoundError):
    def __init__(self, key: str) -> None:
        DotmanError.__init__(self, f"Source file is not mapped: {key}")
        self.key = key


class NotManagedError(NotFoundError):
    def __init__(self, key: str) -> None:
        DotmanError.__init__(self, f"File is not managed by dotman: {key}")
        self.key = key


class InvalidSourceError(DotmanError):
    """The source path has the wrong file type for the requested operation."""


class InvalidDestinationError(DotmanError):
    """The relocation target is absolute or already occupied."""


class LockError(DotmanError):
    """Another dotman process holds the workspace lock."""
