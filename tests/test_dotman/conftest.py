"""Shared fixtures for dotman tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from dotman.infrastructure.config import WorkspaceConfig, load_config

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a fake home directory and point HOME at it."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture()
def project(home: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create ~/project and chdir into it."""
    project_dir = home / "project"
    project_dir.mkdir()
    monkeypatch.chdir(project_dir)
    return project_dir


@pytest.fixture()
def config(home: Path) -> WorkspaceConfig:
    return load_config(home=home)
