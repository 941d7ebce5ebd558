"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Optional


def is_within(path: Path, directory: Path) -> bool:
    """Return True if ``path`` is ``directory`` or lies somewhere below it."""
    resolved = path.resolve()
    target = directory.resolve()
    return resolved == target or target in resolved.parents


def iter_source_paths(
    root: Path,
    extensions: Iterable[str],
    *,
    exclude: Optional[Path] = None,
) -> Iterator[Path]:
    """Yield source files under ``root`` in sorted order, skipping ``exclude``."""
    suffixes = {ext.lower() for ext in extensions}
    for item in sorted(root.rglob("*")):
        if not item.is_file() or item.suffix.lower() not in suffixes:
            continue
        if exclude is not None and is_within(item, exclude):
            continue
        yield item


def relative_folder(relative_path: Path) -> str:
    """Folder of a root-relative path, with ``/`` separators and ``""`` for the root."""
    parent = relative_path.parent
    if parent == Path("."):
        return ""
    return parent.as_posix()
