"""Workspace location constants and the resolved workspace configuration."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from dotman.errors import ConfigError

WORKSPACE_DIR = ".dotfiles"
MAPPINGS_FILE = ".file_mappings.json"
LOCK_SUFFIX = ".lock"
GIT_EXECUTABLE = "git"


class WorkspaceConfig(BaseModel):
    """Resolved locations for one workspace, threaded into every component."""

    model_config = ConfigDict(frozen=True)

    home: Path
    root: Path

    @property
    def mappings_path(self) -> Path:
        return self.root / MAPPINGS_FILE

    @property
    def lock_path(self) -> Path:
        # Beside the root, never inside the git work tree
        return self.root.with_name(self.root.name + LOCK_SUFFIX)


def home_dir() -> Path:
    """Return the current user's home directory, or raise ConfigError."""
    try:
        return Path.home()
    except (KeyError, RuntimeError) as err:
        raise ConfigError("Cannot retrieve home directory") from err


def load_config(home: Path | None = None, root: Path | None = None) -> WorkspaceConfig:
    """Build the workspace configuration.

    ``root`` defaults to ``<home>/.dotfiles``.
    """
    home = home if home is not None else home_dir()
    if not home.is_absolute():
        raise ConfigError(f"Home directory is not absolute: {home}")
    return WorkspaceConfig(home=home, root=root if root is not None else home / WORKSPACE_DIR)
