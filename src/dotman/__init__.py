"""dotman: keep dotfiles in one workspace, symlinked back into place."""

from __future__ import annotations

from dotman.errors import (
    ConfigError,
    DotmanError,
    DuplicateKeyError,
    InvalidDestinationError,
    InvalidSourceError,
    LockError,
    NotFoundError,
    NotManagedError,
    NotMappedError,
    ParseError,
)
from dotman.infrastructure.config import WorkspaceConfig, load_config
from dotman.mappings import MappingStore
from dotman.paths import canonical_key, normalize_path
from dotman.types import LinkResult, LinkStage, MappingEntry, PassthroughResult, UnlinkResult, UnlinkStage
from dotman.workspace import Workspace

__version__ = "0.1.0"

__all__ = [
    # errors
    "ConfigError",
    "DotmanError",
    "DuplicateKeyError",
    "InvalidDestinationError",
    "InvalidSourceError",
    "LockError",
    "NotFoundError",
    "NotManagedError",
    "NotMappedError",
    "ParseError",
    # config
    "WorkspaceConfig",
    "load_config",
    # mappings
    "MappingStore",
    # paths
    "canonical_key",
    "normalize_path",
    # types
    "LinkResult",
    "LinkStage",
    "MappingEntry",
    "PassthroughResult",
    "UnlinkResult",
    "UnlinkStage",
    # workspace
    "Workspace",
]
