"""Lexical path normalization and canonical key derivation.

Nothing here touches the filesystem: ``..`` is resolved by popping the
previous component, so symbolic links along the way are never followed.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath

from dotman.infrastructure.config import home_dir

HOME_SENTINEL = "~"


def _components(path: str) -> tuple[str, ...]:
    """Split ``path`` into components, keeping a leading ``.`` only.

    Interior ``.`` segments and repeated separators are dropped by the parser.
    A POSIX ``//`` anchor is collapsed to ``/``.
    """
    parts = PurePath(path).parts
    if parts and parts[0] == "//":
        parts = (os.sep, *parts[1:])
    head = path.replace(os.altsep, os.sep) if os.altsep else path
    if head.split(os.sep, 1)[0] == os.curdir:
        return (os.curdir, *parts)
    return parts


def normalize_path(path: str | os.PathLike[str], cwd: Path | None = None) -> Path:
    """Return the absolute, lexically resolved form of ``path``.

    A leading ``.`` component re-anchors the result at the current working
    directory rather than being skipped. Keys already persisted depend on
    this, so it must not be "fixed".

    ``foo/bar`` is treated as ``./foo/bar``; ``../foo`` is anchored at the
    current working directory before the ``..`` is applied.
    """
    raw = os.fspath(path)
    cwd = cwd if cwd is not None else Path.cwd()
    parts = _components(raw)
    if not parts:
        return cwd

    result = Path()
    if not PurePath(raw).anchor and parts[0] != os.curdir:
        result = cwd

    for part in parts:
        if part == os.curdir:
            result = result / cwd
        elif part == os.pardir:
            result = result.parent
        else:
            # An anchor part replaces everything accumulated so far.
            result = result / part

    return result


def canonical_key(path: str | os.PathLike[str], home: Path | None = None, cwd: Path | None = None) -> str:
    """Return the mapping key for ``path``.

    Paths under ``home`` are abbreviated to ``~/<rest>``; anything else keeps
    its full normalized form.
    """
    normalized = normalize_path(path, cwd=cwd)
    home = home if home is not None else home_dir()
    try:
        stripped = normalized.relative_to(home)
    except ValueError:
        return str(normalized)
    if not stripped.parts:
        return HOME_SENTINEL + os.sep
    return f"{HOME_SENTINEL}{os.sep}{stripped}"
